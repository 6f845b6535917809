from enum import Enum


class CurvePhase(Enum):
    ACTIVE = "ACTIVE"
    TARGET_REACHED = "TARGET_REACHED"
    GRADUATED = "GRADUATED"

    @classmethod
    def from_str(cls, phase_str: str) -> "CurvePhase":
        """
        Convert a string to a CurvePhase enum.
        :param phase_str: str
        :return: CurvePhase or NotImplementedError
        """
        for phase in cls:
            if phase_str.upper() == phase.name:
                return phase
        raise NotImplementedError(f"No curve phase enum for {phase_str}")

    @property
    def trading_active(self) -> bool:
        return self is CurvePhase.ACTIVE

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class OrderSide(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def from_str(cls, side_str):
        if side_str.upper() == OrderSide.BUY.name:
            return OrderSide.BUY
        elif side_str.upper() == OrderSide.SELL.name:
            return OrderSide.SELL
        else:
            raise NotImplementedError(f"No order side enum for {side_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class EventType(Enum):
    PURCHASE_COMPLETED = "PURCHASE_COMPLETED"
    SALE_COMPLETED = "SALE_COMPLETED"
    PRICE_UPDATED = "PRICE_UPDATED"
    GRADUATION_COMPLETED = "GRADUATION_COMPLETED"

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()
