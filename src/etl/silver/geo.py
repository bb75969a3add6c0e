"""Geographic-code remapping for the SDG extracts.

The SDG coding scheme split, merged or renumbered some areas compared to the
tourism extracts. A remap and the display-name override that goes with it
are kept in one GeoRemap so they can never be applied separately.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from src.etl.exceptions import RuleConfigurationError


@dataclass(frozen=True)
class GeoRemap:
    """Integer code remap plus the name overrides tied to it (keyed by raw code)."""
    codes: Mapping[int, int] = field(default_factory=dict)
    names: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        orphans = sorted(set(self.names) - set(self.codes))
        if orphans:
            raise RuleConfigurationError(
                f"Name overrides without a code remap: {orphans}"
            )
        object.__setattr__(self, 'codes', dict(self.codes))
        object.__setattr__(self, 'names', {raw: name.upper() for raw, name in self.names.items()})

    @classmethod
    def from_config(cls, config: Optional[Mapping]) -> 'GeoRemap':
        """ Build from {'codes': {...}, 'names': {...}} rule data """
        if not config:
            return cls()
        codes: Dict[int, int] = {int(k): int(v) for k, v in config.get('codes', {}).items()}
        names: Dict[int, str] = {int(k): str(v) for k, v in config.get('names', {}).items()}
        return cls(codes=codes, names=names)

    def remap_code(self, code: Optional[int]) -> Optional[int]:
        if code is None:
            return None
        return self.codes.get(code, code)

    def name_override(self, code: Optional[int]) -> Optional[str]:
        if code is None:
            return None
        return self.names.get(code)

    def apply(self, code: Optional[int]) -> Tuple[Optional[int], Optional[str]]:
        """
        Remap a raw area code.

        Returns (remapped code, forced display name or None). Both come from
        the same raw code, so the pair always moves together.
        """
        return self.remap_code(code), self.name_override(code)
