"""Resolves ``module:Class`` targets into config model types."""

import dataclasses
import importlib

from pydantic import BaseModel

from env_overlay.config.infrastructure.errors import ModelImportError


def import_model(target: str) -> type:
    """Import the pydantic model or dataclass named by *target*.

    Raises:
        ModelImportError: if *target* is malformed, cannot be imported, or
            does not name a pydantic model or dataclass.
    """
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ModelImportError(target=target, reason="expected 'module:Class'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ModelImportError(target=target, reason=str(exc)) from exc

    model_type: object = module
    for part in attribute.split("."):
        model_type = getattr(model_type, part, None)
        if model_type is None:
            raise ModelImportError(
                target=target, reason=f"'{attribute}' not found in {module_name}"
            )

    is_model = isinstance(model_type, type) and (
        issubclass(model_type, BaseModel) or dataclasses.is_dataclass(model_type)
    )
    if not is_model:
        raise ModelImportError(
            target=target, reason="not a pydantic model or dataclass"
        )
    return model_type
