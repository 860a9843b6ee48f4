from enum import Enum


class DiscountType(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class NotificationType(str, Enum):
    ERROR = "error"
    SUCCESS = "success"
    WARNING = "warning"


class StockStatus(str, Enum):
    NORMAL = "NORMAL"
    LOW = "LOW"
    OUT_OF_STOCK = "OUT_OF_STOCK"
