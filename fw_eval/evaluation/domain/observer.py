"""EvaluationCatalogObserver port — events emitted while discovering evaluations."""

from typing import Protocol


class EvaluationCatalogObserver(Protocol):
    def catalog_loading_started(self, root: str) -> None: ...

    def catalog_evaluation_found(self, path: str, enabled: bool) -> None: ...

    def catalog_loading_completed(self, root: str, total: int, disabled: int) -> None: ...

    def catalog_loading_failed(self, root: str, reason: str) -> None: ...
