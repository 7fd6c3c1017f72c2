"""Raw CSV row schema"""

from pydantic import BaseModel, ConfigDict, Field


class RawRow(BaseModel):
    """One parsed data line: header -> raw string, before any coercion.

    Headers missing from a short line are simply absent from ``data``.
    """

    model_config = ConfigDict(frozen=True)

    row_number: int = Field(ge=1, description="1-based position among non-blank data lines")
    data: dict[str, str]

    def get(self, header: str) -> str | None:
        return self.data.get(header)
