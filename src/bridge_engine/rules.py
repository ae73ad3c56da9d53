"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for table rules and server tunables."""

    trick_display_delay: float = Field(
        default=1.5,
        ge=0,
        le=10,
        description="Seconds a completed trick stays on the table before it is sealed"
    )
    max_chat_length: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum length of a chat message"
    )
    max_name_length: int = Field(
        default=20,
        ge=1,
        le=50,
        description="Maximum length of a player name"
    )
    room_code_length: int = Field(
        default=6,
        ge=4,
        le=12,
        description="Number of characters in a generated room code"
    )
    redeal_on_pass_out: bool = Field(
        default=True,
        description="Redeal when all four players pass without a contract"
    )
    chat_phases: tuple = Field(
        default=('waiting', 'finished'),
        description="Phases in which chat is relayed"
    )

    @field_validator('chat_phases')
    @classmethod
    def validate_chat_phases(cls, v):
        """Chat phases must be known phase names."""
        from .constants import PHASE_WAITING, PHASE_BIDDING, PHASE_PLAYING, PHASE_FINISHED

        known = {PHASE_WAITING, PHASE_BIDDING, PHASE_PLAYING, PHASE_FINISHED}
        unknown = [phase for phase in v if phase not in known]
        if unknown:
            raise ValueError(f'unknown phases in chat_phases: {unknown}')
        return tuple(v)


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
