"""Configuration model for a recording step."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from boostsec.test_report_recorder.converters.factory import CONVERTERS


class RecorderConfig(BaseModel):
    """Options of one test report recording step."""

    model_config = ConfigDict(frozen=True)

    report_pattern: str = Field(
        ..., description="Ant-style pattern of report files, relative to workspace"
    )
    ignore_if_no_file: bool = Field(
        default=False,
        description="Treat missing reports or empty reports as a silent success",
    )
    report_format: str = Field(
        default="trx", description="Format of the located reports (trx, junit)"
    )

    @field_validator("report_pattern")
    @classmethod
    def _pattern_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("report_pattern must not be empty")
        return value

    @field_validator("report_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in CONVERTERS:
            raise ValueError(
                f"report_format must be one of: {', '.join(sorted(CONVERTERS))}"
            )
        return value
