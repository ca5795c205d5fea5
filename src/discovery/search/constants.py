"""Search backends and presentation limits for web candidate search."""

from src.contracts.discovery_v1 import BackendDescriptor

# Fixed priority order; merged results follow it, not relevance.
DEFAULT_BACKENDS: tuple[BackendDescriptor, ...] = (
    BackendDescriptor(name="HeadHunter", domain="hh.ru", icon="🟥"),
    BackendDescriptor(name="LinkedIn", domain="linkedin.com", icon="🟦"),
    BackendDescriptor(name="Habr Career", domain="career.habr.com", icon="🟩"),
    BackendDescriptor(name="SuperJob", domain="superjob.ru", icon="🟨"),
    BackendDescriptor(name="Avito Работа", domain="avito.ru", icon="🟪"),
)

MAX_ITEMS_PER_BACKEND = 5
GLOBAL_RESULTS_NOTE_THRESHOLD = 15
MIN_QUERY_LENGTH = 3


def select_backends(names: list[str]) -> tuple[BackendDescriptor, ...]:
    """Pick default backends by name or domain, keeping the default order."""
    if not names:
        return DEFAULT_BACKENDS
    wanted = {n.strip().lower() for n in names if n.strip()}
    return tuple(
        b for b in DEFAULT_BACKENDS if b.name.lower() in wanted or b.domain.lower() in wanted
    )
