from fastapi.responses import JSONResponse
from roster.services.actions import ActionResult, Outcome

_STATUS_BY_OUTCOME = {
    Outcome.DONE: 200,
    Outcome.CONFIRM: 200,
    Outcome.INFO: 200,
    Outcome.REJECTED: 400,
    Outcome.ERROR: 502,  # the store refused the write
}

def action_response(result: ActionResult) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_OUTCOME[result.outcome],
        content={"success": result.outcome not in (Outcome.ERROR, Outcome.REJECTED), **result.model_dump(mode="json")},
    )
