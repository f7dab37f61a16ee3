"""
Runtime Configuration Store.

Settings come from ``Cargo.toml`` metadata tables, overridden by CLI arguments:

.. code-block:: toml

    [package.metadata.use-spray]
    std_roots = ["std", "core", "alloc"]
    edition = "2021"
    rustfmt_args = ["--config", "imports_granularity=Crate"]
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from use_spray.core.classifier import DEFAULT_STD_ROOTS
from use_spray.exceptions import ConfigError

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

METADATA_KEY = "use-spray"


class FormatConfig(BaseModel):
  """
  Global configuration container for the rewrite and the rustfmt bridge.
  """

  skip_rustfmt: bool = Field(False, description="If True, print the rewrite without passing it through rustfmt.")
  rustfmt_command: str = Field("rustfmt", description="rustfmt executable name or path.")
  rustfmt_args: List[str] = Field(default_factory=list, description="Extra arguments forwarded to rustfmt.")
  edition: Optional[str] = Field("2021", description="Rust edition passed to rustfmt as --edition.")
  std_roots: List[str] = Field(
    default_factory=lambda: list(DEFAULT_STD_ROOTS),
    description="Crate names grouped together as the standard library family.",
  )
  warn_collisions: bool = Field(True, description="Report local names imported more than once.")

  @field_validator("std_roots")
  @classmethod
  def validate_std_roots(cls, v: List[str]) -> List[str]:
    """
    Ensures the standard library family is a non-empty list of identifiers.

    Args:
        v (List[str]): Root names.

    Returns:
        List[str]: The stripped names with duplicates removed, order kept.

    Raises:
        ValueError: If the list is empty or contains non-identifiers.
    """
    cleaned = list(dict.fromkeys(name.strip() for name in v))
    if not cleaned:
      raise ValueError("std_roots must name at least one crate")
    bad = [name for name in cleaned if not name.isidentifier()]
    if bad:
      raise ValueError(f"Invalid crate names in std_roots: {bad}")
    return cleaned

  @field_validator("edition", mode="before")
  @classmethod
  def validate_edition(cls, v: Any) -> Optional[str]:
    if v is None:
      return v
    v_clean = str(v).strip()
    if not v_clean.isdigit():
      raise ValueError(f"Unknown Rust edition: '{v}'")
    return v_clean

  @classmethod
  def load(
    cls,
    skip_rustfmt: Optional[bool] = None,
    rustfmt_command: Optional[str] = None,
    rustfmt_args: Optional[List[str]] = None,
    edition: Optional[str] = None,
    std_roots: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "FormatConfig":
    """
    Loads configuration from Cargo.toml and overrides it with CLI arguments.

    Args:
        skip_rustfmt (Optional[bool]): Override for skipping rustfmt.
        rustfmt_command (Optional[str]): Override for the executable.
        rustfmt_args (Optional[List[str]]): Extra arguments, appended to the TOML ones.
        edition (Optional[str]): Override for the edition.
        std_roots (Optional[List[str]]): Override for the std family.
        search_path (Optional[Path]): Directory to start searching for Cargo.toml.

    Returns:
        FormatConfig: The fully resolved configuration object.

    Raises:
        ConfigError: If the merged settings fail validation.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    settings: Dict[str, Any] = dict(toml_config)
    if skip_rustfmt is not None:
      settings["skip_rustfmt"] = skip_rustfmt
    if rustfmt_command:
      settings["rustfmt_command"] = rustfmt_command
    if rustfmt_args:
      settings["rustfmt_args"] = [*toml_config.get("rustfmt_args", []), *rustfmt_args]
    if edition:
      settings["edition"] = edition
    if std_roots:
      settings["std_roots"] = std_roots

    try:
      return cls.model_validate(settings)
    except ValidationError as e:
      raise ConfigError(f"Invalid use-spray configuration: {e}") from e


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for a Cargo.toml carrying settings.

  Package metadata wins over workspace metadata in the same file. The search
  stops at the first Cargo.toml that declares either table.

  Args:
      start_path (Path): Directory (or file) to start the search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()
  if current.is_file():
    current = current.parent

  for parent in [current, *current.parents]:
    toml_path = parent / "Cargo.toml"
    if not toml_path.is_file():
      continue
    try:
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
      raise ConfigError(f"Could not read {toml_path}: {e}") from e

    for table in ("package", "workspace"):
      section = data.get(table, {}).get("metadata", {}).get(METADATA_KEY)
      if section is not None:
        return dict(section), parent

  return {}, None
