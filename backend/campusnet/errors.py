class CampusNetError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(CampusNetError):
    status_code = 400


class PortalAccessDenied(CampusNetError):
    status_code = 403


class NotFoundError(CampusNetError):
    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None, detail: str | None = None):
        if detail is None:
            detail = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(detail)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(CampusNetError):
    status_code = 409
