# services/exceptions.py


class PlantCareError(Exception):
    """Base class for errors raised by the service layer"""


class InvalidRecurrenceConfig(PlantCareError):
    """is_recurring is set but pattern/interval are missing, or interval < 1"""


class NotFound(PlantCareError):
    """The referenced task or plant does not exist or belongs to another user"""


class TransientPersistenceFailure(PlantCareError):
    """
    A multi-step write only partly went through, e.g. the successor of a
    completed recurring task could not be inserted. Not reconciled automatically.
    """
