# restpact/suites/openlibrary.py
from http import HTTPStatus

from restpact.config import Settings
from restpact.runner import CaseContext, ContractSuite

ISBN = "9780140328721"


def build_suite(settings: Settings) -> ContractSuite:
    suite = ContractSuite(name="openlibrary", base_url=settings.openlibrary_base_url)

    @suite.case("GET /isbn/:isbn.json returns book details")
    async def book_by_isbn(ctx: CaseContext) -> None:
        await (
            ctx.spec()
            .get(f"/isbn/{ISBN}.json")
            .expect_status(HTTPStatus.OK)
            .expect_keys("title", "authors")
            .run()
        )

    return suite
