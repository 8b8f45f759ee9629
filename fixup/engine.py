#!/usr/bin/env python3
"""
Defines the ReflowEngine class, a model of what the injected browser script does
once the host document is ready, and the single-threaded scheduler it runs on.

The engine has two states. In the gate state, entered only on slow hosts, the
reader is shown a banner and must confirm before anything else happens. In the run
state, the body content is wrapped in a hidden container, a "please wait" overlay
is shown, and then the rewrite rules are applied to the detached container before
it is put back and revealed.
"""

import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

import fixup
import fixup.rules
from fixup.easy_html import EasyHtmlTree, EasyHtmlElement, create_element

STATE_IDLE = "idle"
STATE_GATE = "gate"
STATE_RUN = "run"
STATE_DONE = "done"

HIDDEN_STYLE = "display:none"
OVERLAY_TEXT = "Adjusting book styling, please wait ..."
OVERLAY_STYLE = "position:absolute; padding:1em; font-size:2em; font-style:italic; top: 0em; z-index: 999;"
GATE_BUTTON_LABEL = "Fix layout"
GATE_WARNING = " Warning, it might take a long time to re-render the page in this browser. If possible, use another browser to read this book"

class CooperativeScheduler:
	"""
	A single-threaded FIFO task queue.

	After each task runs, the host's `render` hook is called, which is the point where
	a browser would paint. Tasks are never cancelled and never time out.
	"""

	def __init__(self, render: Optional[Callable[[], None]] = None):
		self._tasks: Deque[Callable[[], None]] = deque()
		self.render = render

	@property
	def pending(self) -> int:
		"""
		Return the number of tasks waiting to run
		"""

		return len(self._tasks)

	def call_soon(self, task: Callable[[], None]) -> None:
		"""
		Queue a task to run at the next scheduling opportunity.
		"""

		self._tasks.append(task)

	def run_until_idle(self) -> int:
		"""
		Run queued tasks, including tasks queued by other tasks, until none are left.

		OUTPUTS
		The number of tasks that ran.
		"""

		ran = 0
		while self._tasks:
			task = self._tasks.popleft()
			task()
			ran = ran + 1

			if self.render:
				self.render()

		return ran

class ReflowResult:
	"""
	What a completed reflow did, and how long the rewrite batch took.
	"""

	def __init__(self, elapsed: float, counts: Dict[str, int]):
		self.elapsed = elapsed
		self.counts = counts

class ReflowEngine:
	"""
	Drives a document through the gate and run states.

	The performance tier is supplied by the host. If it isn't passed in, the engine
	reads it from the `data-performance-tier` attribute on the root element.
	"""

	def __init__(self, dom: EasyHtmlTree, performance_tier: Optional[str] = None, scheduler: Optional[CooperativeScheduler] = None):
		self.dom = dom
		if performance_tier:
			self.performance_tier = fixup.validate_performance_tier(performance_tier)
		else:
			# Like the browser script, anything in the document other than `slow` means normal
			self.performance_tier = fixup.PERFORMANCE_TIER_SLOW if dom.root.get_attr("data-performance-tier") == fixup.PERFORMANCE_TIER_SLOW else fixup.PERFORMANCE_TIER_NORMAL

		self.scheduler = scheduler if scheduler else CooperativeScheduler()
		self.state = STATE_IDLE
		self.banner: Optional[EasyHtmlElement] = None
		self.overlay: Optional[EasyHtmlElement] = None
		self.content: Optional[EasyHtmlElement] = None
		self.result: Optional[ReflowResult] = None

	def start(self) -> None:
		"""
		Handle the host document becoming ready.
		"""

		if self.state != STATE_IDLE:
			raise fixup.InvalidInputException(f"Reflow already started; engine is in the [text]{self.state}[/] state.")

		if self.performance_tier == fixup.PERFORMANCE_TIER_SLOW:
			self._show_gate()
		else:
			self._start_rendering()

	def confirm(self) -> None:
		"""
		Handle the reader pressing the gate banner's button.
		"""

		if self.state != STATE_GATE:
			raise fixup.InvalidInputException(f"Nothing to confirm; engine is in the [text]{self.state}[/] state.")

		if self.banner is not None:
			self.banner.remove()
			self.banner = None

		self._start_rendering()

	def run(self) -> Optional[ReflowResult]:
		"""
		Start the engine and run the scheduler until it is idle.

		On a slow host this stops at the gate and returns None until confirm() is called.
		"""

		if self.state == STATE_IDLE:
			self.start()

		self.scheduler.run_until_idle()

		return self.result

	def _show_gate(self) -> None:
		self.state = STATE_GATE

		body = self.dom.body

		self.banner = create_element("div")
		self.banner.append(create_element("input", {"type": "button", "value": GATE_BUTTON_LABEL}))
		self.banner.append(create_element("em", text=GATE_WARNING))

		body.prepend(self.banner)
		body.remove_attr("style")

	def _start_rendering(self) -> None:
		self.state = STATE_RUN

		body = self.dom.body

		self.content = create_element("div", {"id": fixup.rules.CONTENT_ID, "style": HIDDEN_STYLE})
		body.wrap_children_with(self.content)
		body.remove_attr("style")

		self.scheduler.call_soon(self._show_wait_indicator)

	def _show_wait_indicator(self) -> None:
		"""
		First task: put the overlay up, then give the host a chance to paint it.
		"""

		self.overlay = create_element("div", {"style": OVERLAY_STYLE}, OVERLAY_TEXT)
		self.dom.body.append(self.overlay)

		self.scheduler.call_soon(self._reflow)

	def _reflow(self) -> None:
		"""
		Second task: apply every rewrite rule to the detached container, then reveal it.
		"""

		start_time = time.perf_counter()

		body = self.dom.body

		# Detach the container, so the rules run against a subtree outside the live document
		self.content.remove()

		counts = fixup.rules.apply_rules(fixup.rules.ReflowContext(self.dom, self.content))

		body.prepend(self.content)

		if self.overlay is not None:
			self.overlay.remove()
			self.overlay = None

		self.content.remove_attr("style")

		self.result = ReflowResult(time.perf_counter() - start_time, counts)
		self.state = STATE_DONE
