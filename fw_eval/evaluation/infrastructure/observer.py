"""Structlog implementation of the EvaluationCatalogObserver port."""

import structlog


class StructlogEvaluationCatalogObserver:
    """Delegates evaluation catalog events to structlog.

    Satisfies the EvaluationCatalogObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def catalog_loading_started(self, root: str) -> None:
        self._log.info("catalog.loading_started", root=root)

    def catalog_evaluation_found(self, path: str, enabled: bool) -> None:
        self._log.debug("catalog.evaluation_found", path=path, enabled=enabled)

    def catalog_loading_completed(self, root: str, total: int, disabled: int) -> None:
        self._log.info(
            "catalog.loading_completed", root=root, total=total, disabled=disabled
        )

    def catalog_loading_failed(self, root: str, reason: str) -> None:
        self._log.error("catalog.loading_failed", root=root, reason=reason)
