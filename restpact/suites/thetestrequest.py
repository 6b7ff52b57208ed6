# restpact/suites/thetestrequest.py
"""
Fake blog API: authors, articles and comments.

Create, update and delete calls are echoed back by the service without being
persisted, so those cases only check the echo.
"""

from http import HTTPStatus

from restpact import matchers
from restpact.config import Settings
from restpact.runner import CaseContext, ContractSuite


def make_author(ctx: CaseContext) -> dict:
    return {
        "author": {
            "name": ctx.fake.full_name(),
            "email": ctx.fake.email(),
            "avatar": ctx.fake.image_url(width=100, height=100),
        }
    }


def make_article(ctx: CaseContext) -> dict:
    return {
        "article": {
            "title": ctx.fake.sentence(),
            "body": ctx.fake.paragraph(),
            "views": ctx.fake.integer(0, 1000),
            "likes": ctx.fake.integer(0, 1000),
        }
    }


def make_comment(ctx: CaseContext) -> dict:
    return {
        "comment": {
            "body": ctx.fake.sentences(2),
            "written_by": ctx.fake.full_name(),
        }
    }


def build_suite(settings: Settings) -> ContractSuite:
    suite = ContractSuite(name="thetestrequest", base_url=settings.thetestrequest_base_url)

    # ---------- Authors ----------

    @suite.case("GET /authors lists authors")
    async def list_authors(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get("/authors")
            .expect_status(HTTPStatus.OK)
            .expect_json_like([{
                "id": matchers.number(),
                "name": matchers.string(),
                "email": matchers.string(),
            }])
            .run()
        )

    @suite.case("GET /authors/:id returns one author")
    async def get_author(ctx: CaseContext) -> None:
        await ctx.spec().get("/authors/1").expect_status(HTTPStatus.OK).expect_json_like({"id": 1}).run()

    @suite.case("POST /authors echoes the new author")
    async def post_author(ctx: CaseContext) -> None:
        author = make_author(ctx)
        res = await (
            ctx.spec()
            .post("/authors")
            .with_json(author)
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like(author)
            .run()
        )
        ctx.logger.info(f"Author created (fake): {res.body}")

    @suite.case("PUT /authors/:id echoes the update")
    async def put_author(ctx: CaseContext) -> None:
        author = make_author(ctx)
        await (
            ctx.spec()
            .put("/authors/2")
            .with_json(author)
            .expect_status(HTTPStatus.OK)
            .expect_json_like(author)
            .run()
        )

    @suite.case("DELETE /authors/:id answers 200")
    async def delete_author(ctx: CaseContext) -> None:
        await ctx.spec().delete("/authors/3").expect_status(HTTPStatus.OK).run()

    # ---------- Articles ----------

    @suite.case("GET /articles lists articles")
    async def list_articles(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get("/articles")
            .expect_status(HTTPStatus.OK)
            .expect_json_like([{
                "id": matchers.number(),
                "title": matchers.string(),
                "body": matchers.string(),
            }])
            .run()
        )

    @suite.case("GET /authors/:id/articles lists an author's articles")
    async def list_author_articles(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get("/authors/1/articles")
            .expect_status(HTTPStatus.OK)
            .expect_json_like([{
                "id": matchers.number(),
                "title": matchers.string(),
                "body": matchers.string(),
                "author_id": 1,
            }])
            .run()
        )

    @suite.case("GET /authors/:aid/articles/:id returns one article")
    async def get_article(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get("/authors/1/articles/1")
            .expect_status(HTTPStatus.OK)
            .expect_json_like({"id": 1, "author_id": 1})
            .run()
        )

    @suite.case("POST /authors/:id/articles echoes the new article")
    async def post_article(ctx: CaseContext) -> None:
        article = make_article(ctx)
        await (
            ctx.spec()
            .post("/authors/1/articles")
            .with_json(article)
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like({
                "title": article["article"]["title"],
                "body": article["article"]["body"],
            }, path="article")
            .run()
        )

    @suite.case("PUT /authors/:aid/articles/:id echoes the update")
    async def put_article(ctx: CaseContext) -> None:
        article = make_article(ctx)
        await (
            ctx.spec()
            .put("/authors/1/articles/2")
            .with_json(article)
            .expect_status(HTTPStatus.OK)
            .expect_json_like({
                "title": article["article"]["title"],
                "body": article["article"]["body"],
            }, path="article")
            .run()
        )

    @suite.case("DELETE /authors/:aid/articles/:id answers 200")
    async def delete_article(ctx: CaseContext) -> None:
        await ctx.spec().delete("/authors/1/articles/3").expect_status(HTTPStatus.OK).run()

    # ---------- Comments ----------

    @suite.case("GET /articles/:id/comments lists comments")
    async def list_comments(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get("/articles/1/comments")
            .expect_status(HTTPStatus.OK)
            .expect_json_like([{
                "id": matchers.number(),
                "body": matchers.string(),
                "written_by": matchers.string(),
            }])
            .run()
        )

    @suite.case("GET /articles/:aid/comments/:cid returns one comment")
    async def get_comment(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get("/articles/1/comments/1")
            .expect_status(HTTPStatus.OK)
            .expect_json_like({"id": 1, "article_id": 1})
            .run()
        )

    @suite.case("POST /articles/:id/comments echoes the new comment")
    async def post_comment(ctx: CaseContext) -> None:
        comment = make_comment(ctx)
        await (
            ctx.spec()
            .post("/articles/1/comments")
            .with_json(comment)
            .expect_status(HTTPStatus.CREATED)
            .expect_json_like(comment)
            .run()
        )

    @suite.case("PUT /articles/:aid/comments/:cid echoes the update")
    async def put_comment(ctx: CaseContext) -> None:
        comment = make_comment(ctx)
        await (
            ctx.spec()
            .put("/articles/1/comments/2")
            .with_json(comment)
            .expect_status(HTTPStatus.OK)
            .expect_json_like(comment)
            .run()
        )

    @suite.case("DELETE /articles/:aid/comments/:cid answers 200")
    async def delete_comment(ctx: CaseContext) -> None:
        await ctx.spec().delete("/articles/1/comments/3").expect_status(HTTPStatus.OK).run()

    return suite
