"""Domain errors raised by the services; routes map them to HTTP status codes."""


class MotorPicksError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(MotorPicksError):
    status_code = 404


class InvalidPick(MotorPicksError):
    pass


class InsufficientFunds(MotorPicksError):
    status_code = 402


class InvalidPromoCode(MotorPicksError):
    pass


class PromoCodeNotFound(NotFound):
    pass


class PromoCodeExpired(MotorPicksError):
    pass


class PromoCodeExhausted(MotorPicksError):
    pass


class PromoCodeAlreadyRedeemed(MotorPicksError):
    pass


class InvalidWithdrawal(MotorPicksError):
    pass


class NotificationError(MotorPicksError):
    """Email provider rejected or never received the message."""
    status_code = 502
