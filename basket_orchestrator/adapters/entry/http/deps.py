from fastapi import Request

from ....workers.execution_supervisor import ExecutionSupervisor


def get_supervisor(request: Request) -> ExecutionSupervisor:
    """
    Resolve the supervisor from FastAPI app state.
    """
    supervisor = getattr(request.app.state, "supervisor", None)
    if supervisor is None:
        raise RuntimeError("Supervisor is not initialized in app.state.supervisor")
    return supervisor
