"""Expectations: checks run against a successful response that can still fail the call.

An expectation is any callable ``Response -> Option[HttpError]``. ``Nothing`` means
the response is acceptable; ``Some(error)`` turns the call into ``Left(error)``.
The factories here report the response's own status code in the error.
"""

from typing import Callable, Iterable, List, Type

from pydantic import BaseModel, ValidationError

from hattip.models import HttpError, Response
from hattip.option import Nothing, Option, Some

Expectation = Callable[[Response], Option[HttpError]]


def first_violation(response: Response, expectations: Iterable[Expectation]) -> Option[HttpError]:
    """Run expectations in order and return the first error found, if any."""
    for expectation in expectations:
        error = expectation(response)
        if error.is_some():
            return error
    return Nothing


def _violation(response: Response, err: str) -> Option[HttpError]:
    return Some(HttpError(Some(response.code), err))


def _header_values(response: Response, name: str) -> List[str]:
    wanted = name.lower()
    return [value for key, values in response.headers.items() if key.lower() == wanted for value in values]


def header_matches(name: str, value: str, err: str) -> Expectation:
    """Header ``name`` must be present exactly once with exactly ``value``."""

    def check(response: Response) -> Option[HttpError]:
        values = _header_values(response, name)
        if len(values) != 1 or values[0] != value:
            return _violation(response, err)
        return Nothing

    return check


def content_type_is(media_type: str, err: str) -> Expectation:
    """Content-Type media type must equal ``media_type``, ignoring parameters such as charset."""

    def check(response: Response) -> Option[HttpError]:
        values = _header_values(response, "Content-Type")
        if not values or values[0].split(";")[0].strip().lower() != media_type.lower():
            return _violation(response, err)
        return Nothing

    return check


def max_body_size(limit: int, err: str) -> Expectation:
    """Body must not be longer than ``limit`` bytes."""

    def check(response: Response) -> Option[HttpError]:
        return _violation(response, err) if len(response.data) > limit else Nothing

    return check


def body_matches_model(model: Type[BaseModel], err: str) -> Expectation:
    """Body must be JSON that validates against the pydantic ``model``."""

    def check(response: Response) -> Option[HttpError]:
        try:
            model.model_validate_json(response.data)
        except ValidationError:
            return _violation(response, err)
        return Nothing

    return check
