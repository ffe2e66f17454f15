"""Outcomes every public operation can end in besides success."""


class DomainError(Exception):
    """Base class for the outcomes the transport layer maps to a status."""

    status = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def details(self):
        return {}


class NotFound(DomainError):
    status = 404

    def __init__(self, entity_kind: str, entity_id):
        super().__init__(f"{entity_kind} {entity_id} not found")
        self.entity_kind = entity_kind
        self.entity_id = entity_id

    def details(self):
        return {"entity": self.entity_kind, "id": self.entity_id}


class Forbidden(DomainError):
    """Role or region check failed. ``check`` names which one."""

    status = 403

    def __init__(self, reason: str, check: str):
        super().__init__(reason)
        self.reason = reason
        self.check = check

    def details(self):
        return {"check": self.check}


class FieldError:
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def to_dict(self):
        return {"field": self.field, "message": self.message}

    def __repr__(self):
        return f"<FieldError {self.field}: {self.message}>"


class ValidationFailed(DomainError):
    """One or more input violations, reported together."""

    status = 400

    def __init__(self, errors):
        if isinstance(errors, FieldError):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    @classmethod
    def single(cls, field: str, message: str):
        return cls([FieldError(field, message)])

    def details(self):
        return {"errors": [e.to_dict() for e in self.errors]}


class Conflict(DomainError):
    """The stored state does not allow the attempted transition."""

    status = 409

    def __init__(self, current_state: str, attempted_transition: str, message: str = None):
        super().__init__(
            message or f"Cannot {attempted_transition} an order in state {current_state}"
        )
        self.current_state = current_state
        self.attempted_transition = attempted_transition

    def details(self):
        return {
            "current_state": self.current_state,
            "attempted_transition": self.attempted_transition,
        }
