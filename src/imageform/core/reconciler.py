"""Fuse the submitted form with the API outcome into one page state.

:func:`reconcile` is the only place that branches on the upstream outcome.
Rendering and status selection branch on the :data:`PresentationState` it
returns.
"""

from imageform.core.models import (
    ErrorState,
    Failure,
    FormInput,
    PresentationState,
    Success,
    SuccessState,
    UpstreamResult,
)

UNRECOGNISED_RESULT_MESSAGE = "The image service returned an unrecognised result."


def reconcile(form: FormInput, result: UpstreamResult) -> PresentationState:
    """Build the presentation state for one request.

    Args:
        form: The validated submission, echoed back so the form can be
            redisplayed with the user's values.
        result: The upstream outcome.

    Returns:
        :class:`SuccessState` for :class:`Success`, otherwise
        :class:`ErrorState`.  Anything that is not a recognised arm becomes
        an :class:`ErrorState` with a diagnostic message.
    """
    if isinstance(result, Success):
        return SuccessState(
            prompt=form.prompt,
            count=form.count,
            size=form.size,
            data=tuple(result.lines),
        )

    message = result.message if isinstance(result, Failure) else UNRECOGNISED_RESULT_MESSAGE
    return ErrorState(
        prompt=form.prompt,
        count=form.count,
        size=form.size,
        error=message,
    )
