from functools import lru_cache

from dynaconf import Dynaconf

from graphunit.config.constants import DEFAULTS
from graphunit.config.settings import GraphUnitConfig, MatcherConfig, PolicyConfig

settings = Dynaconf(
    envvar_prefix="GRAPHUNIT",
    load_dotenv=True,
    settings_files=[],
)
settings.update(DEFAULTS)


def build_config(source=None) -> GraphUnitConfig:
    """
    Build a ``GraphUnitConfig`` from a Dynaconf instance (or any object
    with a ``get`` method). Environment variables prefixed with
    ``GRAPHUNIT_`` override the defaults.
    """
    source = settings if source is None else source

    return GraphUnitConfig(
        matcher=MatcherConfig(
            degree_pruning=bool(source.get("MATCHER_DEGREE_PRUNING", True)),
            max_diagnostic_items=int(source.get("MATCHER_MAX_DIAGNOSTIC_ITEMS", 5)),
            log_search=bool(source.get("MATCHER_LOG_SEARCH", False)),
        ),
        policy=PolicyConfig(
            internal_label_prefix=str(
                source.get("POLICY_INTERNAL_LABEL_PREFIX", "_GA_")
            ),
        ),
    )


@lru_cache
def load_config() -> GraphUnitConfig:
    return build_config()
