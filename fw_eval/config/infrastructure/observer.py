"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str, num_models: int) -> None:
        self._log.info("config.loaded", path=path, num_models=num_models)

    def config_defaulted(self, path: str) -> None:
        self._log.info("config.defaulted", path=path)

    def config_env_override_applied(self, variable: str, section: str) -> None:
        self._log.info("config.env_override_applied", variable=variable, section=section)

    def config_judge_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.judge_temperature_warning",
            temperature=temperature,
            message="Judge temperature > 0.0 may produce non-deterministic grading",
        )
