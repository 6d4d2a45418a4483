from dataclasses import dataclass

@dataclass
class Health:
    current: int
    max_hp: int

    def clamp(self, floor: int = 0) -> None:
        if self.current < floor:
            self.current = floor
        if self.current > self.max_hp:
            self.current = self.max_hp

    def is_alive(self) -> bool:
        return self.current > 0
