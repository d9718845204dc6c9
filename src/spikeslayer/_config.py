"""Pipeline configuration for the spike detector.

This module resolves caller options against :data:`CONFIG_DEFAULTS` and
defines :class:`SlayerConfig`, the frozen view of a resolved configuration
that algorithms and filters receive.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from spikeslayer._errors import TypeMismatch

#: Documented defaults, keyed by option name.
CONFIG_DEFAULTS: dict[str, Any] = {
    "algorithm": "default",
    "minPeakDistance": 30,
    "minPeakHeight": 0,
    "transformedValueProperty": "y",
}

#: Option name -> :class:`SlayerConfig` field name.
#: Snake-case field names are accepted on input as well.
CONFIG_ALIASES: dict[str, str] = {
    "algorithm": "algorithm",
    "minPeakDistance": "min_peak_distance",
    "minPeakHeight": "min_peak_height",
    "transformedValueProperty": "transformed_value_property",
}


def resolve_config(options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Fill every missing recognized option with its default.

    Parameters
    ----------
    options : mapping or None, optional
        Caller options.  Keys may use the option names of
        :data:`CONFIG_DEFAULTS` or the matching snake-case field names.

    Returns
    -------
    dict
        New dictionary keyed by option name.  Caller values are never
        overwritten and unrecognized keys pass through untouched.

    Raises
    ------
    TypeMismatch
        If *options* is neither ``None`` nor a mapping.

    Examples
    --------
    >>> resolve_config({"minPeakHeight": 3, "color": "red"})["minPeakDistance"]
    30
    >>> resolve_config({"minPeakHeight": 3, "color": "red"})["color"]
    'red'
    """
    if options is None:
        return dict(CONFIG_DEFAULTS)
    if not isinstance(options, Mapping):
        msg = f"config should be a mapping. Was: {options!r}"
        raise TypeMismatch(msg)

    fields_to_options = {name: option for option, name in CONFIG_ALIASES.items()}
    resolved: dict[str, Any] = {}
    for key, value in options.items():
        option = fields_to_options.get(key, key)
        if option != key and option in options:
            continue  # the option spelling wins over the field spelling
        resolved[option] = value

    for option, default in CONFIG_DEFAULTS.items():
        resolved.setdefault(option, default)
    return resolved


@dataclass(frozen=True)
class SlayerConfig:
    """Resolved configuration of a :class:`~spikeslayer.Slayer`.

    Values are stored verbatim; each consumer validates the option it reads.

    Parameters
    ----------
    algorithm : str or callable
        Built-in strategy identifier, or the strategy itself.
    min_peak_distance : int
        Minimum X-separation between accepted peaks.
    min_peak_height : float
        Minimum Y-value for a peak to be accepted.
    transformed_value_property : str
        Spike property an algorithm-agnostic consumer should read.
    extra : mapping
        Unrecognized options, carried through unchanged.

    Examples
    --------
    >>> cfg = SlayerConfig.from_options({"minPeakHeight": 3})
    >>> cfg.min_peak_height, cfg.min_peak_distance
    (3, 30)
    """

    algorithm: Any = CONFIG_DEFAULTS["algorithm"]
    min_peak_distance: Any = CONFIG_DEFAULTS["minPeakDistance"]
    min_peak_height: Any = CONFIG_DEFAULTS["minPeakHeight"]
    transformed_value_property: Any = CONFIG_DEFAULTS["transformedValueProperty"]
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> SlayerConfig:
        """Resolve *options* with :func:`resolve_config` and freeze the result."""
        resolved = resolve_config(options)
        data = {CONFIG_ALIASES[option]: resolved.pop(option) for option in CONFIG_ALIASES}
        return cls(**data, extra=resolved)

    def to_options(self) -> dict[str, Any]:
        """Return the configuration keyed by option name, extras included."""
        options = dict(self.extra)
        for option, name in CONFIG_ALIASES.items():
            options[option] = getattr(self, name)
        return options

    def get(self, option: str, default: Any = None) -> Any:
        """Look up an option by option name, field name or extra key."""
        if option in CONFIG_ALIASES:
            return getattr(self, CONFIG_ALIASES[option])
        if option in CONFIG_ALIASES.values():
            return getattr(self, option)
        return self.extra.get(option, default)
