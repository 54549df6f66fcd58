"""
Envelope validation for provider responses.

Every endpoint answers ``{"success": bool, "data": <payload> | null, "error"?: str}``.
A response only counts as a success when ``success`` is exactly true and
``data`` is present with the shape the endpoint promises.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .transport import EnvelopeError


class PayloadShape(str, Enum):
    """Shape of the ``data`` payload an endpoint promises."""
    SUBJECT_LIST = "subject_list"
    SUBJECT_LIST_OR_OBJECT = "subject_list_or_object"
    INCIDENT_LIST = "incident_list"
    SUBJECT_OBJECT = "subject_object"


def unwrap_envelope(payload: Any, data_key: Optional[str] = None) -> Any:
    """
    Check the envelope and return its ``data`` payload.

    Args:
        payload: Decoded JSON body
        data_key: Optional dotted path into ``data`` (e.g. ``urgentInterventions``)

    Raises:
        EnvelopeError: if the envelope is malformed or reports failure
    """
    if not isinstance(payload, dict):
        raise EnvelopeError(f"Envelope must be a JSON object, got {type(payload).__name__}")

    if "success" not in payload:
        raise EnvelopeError("Envelope has no success flag")

    if payload["success"] is not True:
        message = payload.get("error") or payload.get("message") or "no error message"
        raise EnvelopeError(f"Provider reported failure: {message}")

    data = payload.get("data")
    if data is None:
        raise EnvelopeError("Envelope has no data")

    if data_key:
        for part in data_key.split("."):
            if not isinstance(data, dict) or data.get(part) is None:
                raise EnvelopeError(f"Envelope data has no '{data_key}' field")
            data = data[part]

    return data


def require_shape(data: Any, shape: PayloadShape) -> Union[List[Any], Dict[str, Any]]:
    """
    Check ``data`` against the promised shape.

    List shapes return a list of entries; SUBJECT_LIST_OR_OBJECT wraps a single
    object into a one-element list. SUBJECT_OBJECT returns the object itself.
    """
    if shape is PayloadShape.SUBJECT_OBJECT:
        if not isinstance(data, dict):
            raise EnvelopeError(f"Expected an object payload, got {type(data).__name__}")
        return data

    if shape is PayloadShape.SUBJECT_LIST_OR_OBJECT and isinstance(data, dict):
        return [data]

    if not isinstance(data, list):
        raise EnvelopeError(f"Expected an array payload, got {type(data).__name__}")

    return data
