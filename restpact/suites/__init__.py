# restpact/suites/__init__.py
"""
Suite Registry

Bundled contract suites, one per external API. Each module exposes
``build_suite(settings) -> ContractSuite``.
"""

from typing import Callable, Dict, Iterable, List, Optional

from restpact.config import Settings
from restpact.runner import ContractSuite
from restpact.suites import fakestore, openlibrary, simpleapi, thetestrequest

SUITE_REGISTRY: Dict[str, Callable[[Settings], ContractSuite]] = {
    "fakestore": fakestore.build_suite,
    "simpleapi": simpleapi.build_suite,
    "openlibrary": openlibrary.build_suite,
    "thetestrequest": thetestrequest.build_suite,
}


def get_all_suite_names() -> List[str]:
    return list(SUITE_REGISTRY.keys())


def build_suites(settings: Settings, names: Optional[Iterable[str]] = None) -> List[ContractSuite]:
    """Build the named suites (all when ``names`` is empty) in registry order."""
    wanted = list(names or [])
    unknown = [n for n in wanted if n not in SUITE_REGISTRY]
    if unknown:
        raise ValueError(f"Unknown suite(s): {', '.join(unknown)}. Available: {', '.join(SUITE_REGISTRY)}")
    return [build(settings) for name, build in SUITE_REGISTRY.items() if not wanted or name in wanted]
