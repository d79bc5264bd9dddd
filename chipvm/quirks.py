"""Behavioural toggles for instructions whose semantics differ between interpreters."""

from flax.struct import dataclass


@dataclass(frozen=True)
class Quirks:
    """Interpreter quirk flags.

    Attributes:
        vf_reset: 8XY1/8XY2/8XY3 clear VF after the logic operation
        memory_increments_index: FX55/FX65 leave I pointing past the last register
        shift_uses_vy: 8XY6/8XYE shift VY and store the result in VX
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0
        index_overflow_sets_vf: FX1E sets VF when I + VX passes 0xFFF
        clip_sprites: pixels drawn past the screen edge are dropped instead of wrapping
    """
    vf_reset: bool = False
    memory_increments_index: bool = False
    shift_uses_vy: bool = False
    jump_uses_vx: bool = False
    index_overflow_sets_vf: bool = False
    clip_sprites: bool = False

    @staticmethod
    def from_name(name: str) -> "Quirks":
        """Look up a named preset ("default", "cosmac_vip" or "modern")."""
        presets = {
            "default": DEFAULT,
            "cosmac_vip": COSMAC_VIP,
            "modern": MODERN,
        }
        if name not in presets:
            raise ValueError(
                f"Unknown quirk preset '{name}'. Available: {list(presets.keys())}"
            )
        return presets[name]


DEFAULT = Quirks()

# Original RCA COSMAC VIP interpreter
COSMAC_VIP = Quirks(
    vf_reset=True,
    memory_increments_index=True,
    shift_uses_vy=True,
    clip_sprites=True,
)

# SUPER-CHIP derived behaviour most modern ROMs expect
MODERN = Quirks(
    jump_uses_vx=True,
    clip_sprites=True,
)
