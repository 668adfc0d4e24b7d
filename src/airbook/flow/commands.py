"""Commands sent to the booking workflow.

The presentation layer expresses every user action as a command; the
workflow answers each with a CommandResult and notifies observers.
"""

from typing import Any, ClassVar, Literal, get_args, get_origin

from pydantic import BaseModel, Field

from airbook.core.models import Passenger, PaymentDetails


class Command(BaseModel):
    """Base workflow command.

    Subclasses register themselves by the literal default of ``type`` so
    that plain dicts can be parsed back into typed commands.
    """

    type: str

    _registry: ClassVar[dict[str, type["Command"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        annotation = cls.__annotations__.get("type")
        if annotation is not None and get_origin(annotation) is Literal:
            args = get_args(annotation)
            if args and isinstance(args[0], str):
                Command._registry[args[0]] = cls

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "Command":
        """Parse a dictionary into a typed Command using the registry."""
        command_type = data.get("type")
        if not command_type:
            raise ValueError("Command data missing 'type' field")
        cmd_class = cls._registry.get(command_type)
        if not cmd_class:
            raise ValueError(f"Unknown command type: {command_type}")
        return cmd_class.model_validate(data)


class Advance(Command):
    """Move to the next step if its guard passes."""

    type: Literal["advance"] = "advance"


class GoBack(Command):
    """Return to the previous step without validation."""

    type: Literal["back"] = "back"


class UpdatePassenger(Command):
    type: Literal["update_passenger"] = "update_passenger"
    index: int
    passenger: Passenger


class UpdatePayment(Command):
    type: Literal["update_payment"] = "update_payment"
    payment: PaymentDetails = Field(default_factory=PaymentDetails)


class UpdateSpecialRequests(Command):
    type: Literal["update_special_requests"] = "update_special_requests"
    text: str | None = None
