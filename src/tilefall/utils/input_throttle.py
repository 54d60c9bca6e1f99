from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Dict, Tuple


@dataclass(slots=True)
class MouseThrottle:
	"""Filters rapid repeated presses before they turn into board intents.

	A press is rejected when it repeats on (nearly) the same spot with the same
	button inside ``min_interval`` seconds, or while a ``block`` window is open.
	"""

	min_interval: float = 0.15
	min_distance: float = 6.0
	clock: Callable[[], float] | None = field(default=None, repr=False)

	_clock: Callable[[], float] = field(init=False, repr=False)
	_last_press: Dict[int, Tuple[float, float, float]] = field(init=False, repr=False)
	_block_until: float = field(init=False, default=0.0, repr=False)
	_sequence: int = field(init=False, default=0, repr=False)

	def __post_init__(self) -> None:
		self._clock = self.clock or monotonic
		self._last_press = {}
		self.min_interval = max(0.0, float(self.min_interval))
		self.min_distance = max(0.0, float(self.min_distance))

	def allow(self, x: float, y: float, button: int) -> bool:
		now = self._clock()
		if now < self._block_until:
			return False
		last = self._last_press.get(button)
		if last is not None:
			last_time, last_x, last_y = last
			dx = x - last_x
			dy = y - last_y
			near = (dx * dx + dy * dy) <= self.min_distance * self.min_distance
			if near and (now - last_time) < self.min_interval:
				return False
		self._last_press[button] = (now, x, y)
		self._sequence += 1
		return True

	def block(self, duration: float) -> None:
		if duration <= 0.0:
			return
		self._block_until = max(self._block_until, self._clock() + float(duration))

	def reset(self) -> None:
		self._last_press.clear()
		self._block_until = 0.0

	@property
	def sequence(self) -> int:
		return self._sequence
