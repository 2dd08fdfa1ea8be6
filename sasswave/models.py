"""Pydantic models shared across the scaffolding stages."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "bun", "yarn", "pnpm")

Framework = Literal["react", "next.js"]
Language = Literal["JavaScript", "TypeScript"]


class Answers(BaseModel):
    """Validated answers driving every scaffolding decision.

    Produced once by the prompt flow (or CLI flags) and never mutated.
    ``framework`` and ``language`` together select which candidate file
    layouts the post-processors check.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(default="sasswave-app", description="Project directory name")
    framework: Framework = Field(default="react")
    language: Language = Field(default="TypeScript")
    pkg_manager: str = Field(default="npm", alias="pkgManager")
    git: bool = Field(default=True)
    want3d: bool = Field(default=False)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name must not be empty")
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"project name must be a plain directory name: {value!r}")
        return value

    @field_validator("pkg_manager")
    @classmethod
    def _check_pkg_manager(cls, value: str) -> str:
        if value not in SUPPORTED_PACKAGE_MANAGERS:
            raise ValueError(
                f"unsupported package manager {value!r} "
                f"(expected one of {', '.join(SUPPORTED_PACKAGE_MANAGERS)})"
            )
        return value

    @property
    def is_typescript(self) -> bool:
        return self.language == "TypeScript"

    @property
    def variant(self) -> str:
        """Candidate-table key: ``"ts"`` or ``"js"``."""
        return "ts" if self.is_typescript else "js"


class AssetEntry(BaseModel):
    """One entry of ``assets-manifest.json``."""

    model_config = ConfigDict(extra="ignore")

    url: str | None = None
    dest: str | None = None
    framework: str | None = None
    frameworks: list[str] | None = None

    @field_validator("frameworks", mode="before")
    @classmethod
    def _only_list_frameworks(cls, value: object) -> object:
        # Non-array values count as absent.
        return value if isinstance(value, list) else None

    def applies_to(self, framework: str) -> bool:
        """Return ``True`` when the entry has a URL and targets *framework*.

        A ``frameworks`` list wins over a single ``framework`` value; an entry
        with neither applies to every framework.
        """
        if not self.url:
            return False
        if self.frameworks is not None:
            return framework in self.frameworks
        if self.framework:
            return self.framework == framework
        return True
