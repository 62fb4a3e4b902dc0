"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, path: str, num_models: int) -> None: ...

    def config_defaulted(self, path: str) -> None: ...

    def config_env_override_applied(self, variable: str, section: str) -> None: ...

    def config_judge_temperature_warning(self, temperature: float) -> None: ...
