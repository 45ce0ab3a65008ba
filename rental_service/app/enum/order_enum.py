from enum import Enum


class WarningType(str, Enum):

    negative_stock = "negative_stock"


class WarningSeverity(str, Enum):

    high = "high"
