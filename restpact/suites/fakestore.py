# restpact/suites/fakestore.py
"""
Fake e-commerce store: products, users, carts and login.

Login credentials travel in the JSON body, as the store expects.
"""

from datetime import datetime, timezone
from http import HTTPStatus

from restpact import matchers
from restpact.config import Settings
from restpact.runner import CaseContext, ContractSuite

VALID_LOGIN = {"username": "mor_2314", "password": "83r5^_"}


def make_user(ctx: CaseContext) -> dict:
    fake = ctx.fake
    return {
        "email": fake.email(),
        "username": fake.username(),
        "password": fake.password(),
        "name": {
            "firstname": fake.first_name(),
            "lastname": fake.last_name(),
        },
        "address": {
            "city": fake.city(),
            "street": fake.street(),
            "number": fake.integer(1, 125),
            "zipcode": fake.postal_code(),
            "geolocation": {
                "lat": fake.latitude(),
                "long": fake.longitude(),
            },
        },
        "phone": fake.phone(),
    }


def build_suite(settings: Settings) -> ContractSuite:
    suite = ContractSuite(name="fakestore", base_url=settings.fakestore_base_url)

    # ---------- Products ----------

    @suite.case("GET /products/:id returns one product")
    async def get_product(ctx: CaseContext) -> None:
        await ctx.spec().get("/products/1").expect_status(HTTPStatus.OK).expect_json_like({"id": 1}).run()

    @suite.case("PUT /products/:id updates a product")
    async def put_product(ctx: CaseContext) -> None:
        product = {
            "title": "Updated product",
            "price": 199.99,
            "description": "Updated description",
            "image": "https://i.pravatar.cc",
            "category": "jewelery",
        }
        await (
            ctx.spec()
            .put("/products/1")
            .with_json(product)
            .expect_status(HTTPStatus.OK)
            .expect_json_like({"title": product["title"], "price": product["price"]})
            .run()
        )

    # ---------- Users ----------

    @suite.case("GET /users/:id returns one user")
    async def get_user(ctx: CaseContext) -> None:
        await ctx.spec().get("/users/1").expect_status(HTTPStatus.OK).expect_json_like({"id": 1}).run()

    @suite.case("POST /users creates a user")
    async def post_user(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .post("/users")
            .with_json(make_user(ctx))
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like({"id": matchers.regex(r"\d+")})
            .run()
        )

    @suite.case("PUT /users/:id updates a user")
    async def put_user(ctx: CaseContext) -> None:
        user = make_user(ctx)
        user["username"] = "updated_user"
        await (
            ctx.spec()
            .put("/users/1")
            .with_json(user)
            .expect_status(HTTPStatus.OK)
            .expect_json_like({"username": user["username"], "email": user["email"]})
            .run()
        )

    # ---------- Carts ----------

    @suite.case("GET /carts/:id returns one cart")
    async def get_cart(ctx: CaseContext) -> None:
        await ctx.spec().get("/carts/1").expect_status(HTTPStatus.OK).expect_json_like({"id": 1}).run()

    @suite.case("POST /carts creates a cart")
    async def post_cart(ctx: CaseContext) -> None:
        cart = {
            "userId": 1,
            "date": datetime.now(timezone.utc).isoformat(),
            "products": [
                {"productId": 1, "quantity": 2},
                {"productId": 2, "quantity": 1},
            ],
        }
        await (
            ctx.spec()
            .post("/carts")
            .with_json(cart)
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like({"userId": cart["userId"]})
            .run()
        )

    @suite.case("PUT /carts/:id updates a cart")
    async def put_cart(ctx: CaseContext) -> None:
        cart = {
            "userId": 1,
            "date": datetime.now(timezone.utc).isoformat(),
            "products": [{"productId": 3, "quantity": 5}],
        }
        await (
            ctx.spec()
            .put("/carts/1")
            .with_json(cart)
            .expect_status(HTTPStatus.OK)
            .expect_json_like({"userId": cart["userId"]})
            .run()
        )

    # ---------- Auth ----------

    @suite.case("POST /auth/login returns a token for valid credentials")
    async def login_ok(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .post("/auth/login")
            .with_json(VALID_LOGIN)
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like({"token": matchers.regex(r"\w+")})
            .run()
        )

    @suite.case("POST /auth/login rejects invalid credentials")
    async def login_invalid(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .post("/auth/login")
            .with_json({"username": "invalid_user", "password": "wrong_password"})
            .expect_status(HTTPStatus.UNAUTHORIZED)
            .run()
        )

    return suite
