from typing import Any, Dict, List, Optional, Tuple

from .errors import FieldError, ValidationError

# field -> (min length, max length, label used in messages)
JOB_FIELDS: Dict[str, Tuple[int, int, str]] = {
    "title": (1, 200, "Title"),
    "description": (1, 5000, "Description"),
    "contact": (1, 500, "Contact"),
}

APPLICATION_FIELDS: Dict[str, Tuple[int, int, str]] = {
    "applicantName": (1, 200, "Name"),
    "applicantContact": (1, 500, "Contact"),
}

MESSAGE_MAX = 2000


def text_length(value: str) -> int:
    """Length in UTF-16 code units, the way browsers count form input."""
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


def _check_str(data: Dict[str, Any], field: str, min_len: int, max_len: int, label: str) -> Optional[FieldError]:
    if field not in data or data[field] is None:
        return FieldError(field, "required", f"{label} is required")
    value = data[field]
    if not isinstance(value, str):
        return FieldError(field, "type", f"{label} must be a string")
    length = text_length(value)
    if length < min_len:
        return FieldError(field, "min_length", f"{label} is required")
    if length > max_len:
        return FieldError(field, "max_length", f"{label} must be at most {max_len} characters")
    return None


def _require_mapping(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError([FieldError("$", "type", "Input must be an object")])
    return data


def validate_job(data: Dict[str, Any]) -> List[FieldError]:
    """
    Returns the field errors for a job creation payload. Empty list means valid.
    Lengths are checked on the raw values; trimming happens on write.
    """
    errors: List[FieldError] = []
    for field, (lo, hi, label) in JOB_FIELDS.items():
        err = _check_str(data, field, lo, hi, label)
        if err:
            errors.append(err)
    return errors


def validate_application(data: Dict[str, Any]) -> List[FieldError]:
    """Returns the field errors for an application payload."""
    errors: List[FieldError] = []

    job_id = data.get("jobId")
    if job_id is None:
        errors.append(FieldError("jobId", "required", "Job id is required"))
    elif not isinstance(job_id, str):
        errors.append(FieldError("jobId", "type", "Job id must be a string"))

    for field, (lo, hi, label) in APPLICATION_FIELDS.items():
        err = _check_str(data, field, lo, hi, label)
        if err:
            errors.append(err)

    # optional and nullable
    message = data.get("message")
    if message is not None:
        if not isinstance(message, str):
            errors.append(FieldError("message", "type", "Message must be a string"))
        elif text_length(message) > MESSAGE_MAX:
            errors.append(FieldError("message", "max_length", f"Message must be at most {MESSAGE_MAX} characters"))

    return errors


def validate_job_lookup(data: Dict[str, Any]) -> List[FieldError]:
    job_id = data.get("id")
    if job_id is None:
        return [FieldError("id", "required", "Job id is required")]
    if not isinstance(job_id, str):
        return [FieldError("id", "type", "Job id must be a string")]
    if not job_id.strip():
        return [FieldError("id", "min_length", "Job id must not be empty")]
    return []


def parse_job(data: Any) -> Dict[str, str]:
    """
    Validate a job payload and return the trimmed values.

    Raises:
        ValidationError: Listing every offending field
    """
    data = _require_mapping(data)
    errors = validate_job(data)
    if errors:
        raise ValidationError(errors)
    return {field: data[field].strip() for field in JOB_FIELDS}


def parse_application(data: Any) -> Dict[str, Optional[str]]:
    """
    Validate an application payload and return the trimmed values.
    An omitted or null message stays None.
    """
    data = _require_mapping(data)
    errors = validate_application(data)
    if errors:
        raise ValidationError(errors)
    message = data.get("message")
    return {
        "jobId": data["jobId"],
        "applicantName": data["applicantName"].strip(),
        "applicantContact": data["applicantContact"].strip(),
        "message": message.strip() if message is not None else None,
    }


def parse_job_lookup(data: Any) -> str:
    data = _require_mapping(data)
    errors = validate_job_lookup(data)
    if errors:
        raise ValidationError(errors)
    return data["id"]
