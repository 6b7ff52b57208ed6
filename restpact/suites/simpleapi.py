# restpact/suites/simpleapi.py
"""
Simple inventory API (items).

Note: updating an item that does not exist answers 400, not 404. That is how
this API behaves and the case asserts it as-is.
"""

from http import HTTPStatus

from restpact import matchers
from restpact.config import Settings
from restpact.runner import CaseContext, ContractSuite

MISSING_ITEM_ID = 999999


def make_item(ctx: CaseContext, item_type: str = "cd") -> dict:
    return {
        "type": item_type,
        "isbn13": ctx.fake.isbn13(),
        "price": 70.0,
        "numberinstock": 20,
    }


def build_suite(settings: Settings) -> ContractSuite:
    suite = ContractSuite(name="simpleapi", base_url=settings.simpleapi_base_url)

    @suite.case("GET /items/:id returns an item")
    async def get_item(ctx: CaseContext) -> None:
        await ctx.spec().get("/items/6").expect_status(HTTPStatus.OK).run()

    @suite.case("PUT /items/:id updates an item")
    async def put_item(ctx: CaseContext) -> None:
        item = {
            "type": "dvd",
            "isbn13": "152-7-65-672400-8",
            "price": 20.0,
            "numberinstock": 10,
        }
        await (
            ctx.spec()
            .put("/items/7")
            .with_json(item)
            .expect_status(HTTPStatus.OK)
            .expect_json_like({"id": 7, **item})
            .run()
        )

    @suite.case("POST /items creates an item")
    async def post_item(ctx: CaseContext) -> None:
        item = make_item(ctx)
        res = await (
            ctx.spec()
            .post("/items")
            .with_json(item)
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like(item)
            .run()
        )
        ctx.logger.info(f"Item created: {res.body}")

    @suite.case("POST /items without type is rejected")
    async def post_item_missing_type(ctx: CaseContext) -> None:
        item = make_item(ctx)
        del item["type"]
        await ctx.spec().post("/items").with_json(item).expect_status(HTTPStatus.BAD_REQUEST).run()

    @suite.case("DELETE /items/:id removes the item")
    async def delete_item(ctx: CaseContext) -> None:
        created = await (
            ctx.spec()
            .post("/items")
            .with_json(make_item(ctx))
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like({"id": matchers.number()})
            .run()
        )
        item_id = created.body["id"]

        await ctx.spec().delete(f"/items/{item_id}").expect_status(HTTPStatus.OK).run()
        await ctx.spec().get(f"/items/{item_id}").expect_status(HTTPStatus.NOT_FOUND).run()

    @suite.case("PUT /items/:id on a missing item answers 400")
    async def put_missing_item(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .put(f"/items/{MISSING_ITEM_ID}")
            .with_json(make_item(ctx, "book"))
            .expect_status(HTTPStatus.BAD_REQUEST)
            .run()
        )

    return suite
