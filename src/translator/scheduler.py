"""自动翻译防抖调度器.

用户每次修改输入或切换语言都会重置计时器，静默期结束后才真正发出一次翻译请求。
每个已发出的请求带有递增序号，只有最新序号的结果会写回会话状态；
发出新请求时旧的请求任务会被取消。
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional

from config.logging_config import get_logger
from config.settings import settings
from models.models import TranslationRequest
from translator.languages import language_name

logger = get_logger(__name__)


@dataclass
class TranslationSession:
    """客户端持有的翻译状态，仅存在于内存中."""

    source_language: str = "en"
    target_language: str = "es"
    source_text: str = ""
    translated_text: str = ""
    pending: bool = False
    timer_handle: Optional[asyncio.TimerHandle] = None

    @property
    def is_scheduled(self) -> bool:
        """是否有等待触发的翻译（界面上的"Auto-translating..."提示）."""
        return self.timer_handle is not None


class DebounceScheduler:
    """根据用户编辑决定何时发出翻译请求，并把结果写回会话."""

    def __init__(
        self,
        client,
        session: Optional[TranslationSession] = None,
        quiet_interval: Optional[float] = None,
        on_change: Optional[Callable[[TranslationSession], None]] = None,
    ):
        """
        初始化调度器.
        :param client: 提供 async translate(request) -> str 的翻译客户端
        :param session: 会话状态，默认新建
        :param quiet_interval: 静默期（秒），默认读取配置 QUIET_INTERVAL_MS
        :param on_change: 每次状态变化后的回调
        """
        self.client = client
        self.session = session or TranslationSession()
        if quiet_interval is None:
            quiet_interval = settings.quiet_interval_ms / 1000
        self.quiet_interval = quiet_interval
        self.on_change = on_change
        self._issued_seq = 0
        self._inflight: Optional[asyncio.Task] = None
        self._idle = asyncio.Event()
        self._idle.set()

    def on_input_changed(self, text: str) -> None:
        self.session.source_text = text
        self._reschedule()

    def on_source_language_changed(self, code: str) -> None:
        self.session.source_language = code
        self._reschedule()

    def on_target_language_changed(self, code: str) -> None:
        self.session.target_language = code
        self._reschedule()

    def swap_languages(self) -> None:
        """交换源语言和目标语言；两侧文本都非空时一并交换，便于继续编辑译文."""
        s = self.session
        s.source_language, s.target_language = s.target_language, s.source_language
        if s.source_text and s.translated_text:
            s.source_text, s.translated_text = s.translated_text, s.source_text
        self._reschedule()

    def clear(self) -> None:
        self.on_input_changed("")

    async def wait_idle(self) -> None:
        """等待直到没有待触发的计时器和进行中的请求."""
        await self._idle.wait()

    async def aclose(self) -> None:
        """销毁会话：取消计时器和进行中的请求."""
        self._cancel_timer()
        task = self._cancel_inflight()
        self._issued_seq += 1
        self.session.pending = False
        self._notify()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _reschedule(self) -> None:
        self._cancel_timer()
        if not self.session.source_text.strip():
            self._cancel_inflight()
            self._issued_seq += 1
            self.session.translated_text = ""
            self.session.pending = False
            self._notify()
            return

        loop = asyncio.get_running_loop()
        self.session.timer_handle = loop.call_later(self.quiet_interval, self._fire)
        self._notify()

    def _fire(self) -> None:
        s = self.session
        s.timer_handle = None
        self._cancel_inflight()
        self._issued_seq += 1
        seq = self._issued_seq

        if s.source_language == s.target_language:
            logger.debug("Source and target language are the same, skipping request")
            s.translated_text = s.source_text
            s.pending = False
            self._notify()
            return

        s.pending = True
        request = TranslationRequest(
            source_language=s.source_language,
            target_language=s.target_language,
            source_text=s.source_text,
            source_language_name=language_name(s.source_language),
            target_language_name=language_name(s.target_language),
        )
        logger.info(
            f"Firing translation #{seq}: {request.source_language_name} -> "
            f"{request.target_language_name} ({len(request.source_text)} chars)"
        )
        self._inflight = asyncio.get_running_loop().create_task(self._run(seq, request))
        self._notify()

    async def _run(self, seq: int, request: TranslationRequest) -> None:
        try:
            result = await self.client.translate(request)
        except Exception as e:
            logger.error(f"Translation error: {e}")
            result = f"Translation failed: {str(e) or 'Unknown error'}"

        if seq != self._issued_seq:
            logger.debug(f"Discarding stale translation #{seq}")
            return
        self._inflight = None
        self.session.translated_text = result
        self.session.pending = False
        self._notify()

    def _cancel_timer(self) -> None:
        if self.session.timer_handle is not None:
            self.session.timer_handle.cancel()
            self.session.timer_handle = None

    def _cancel_inflight(self) -> Optional[asyncio.Task]:
        task, self._inflight = self._inflight, None
        if task is not None and not task.done():
            task.cancel()
            return task
        return None

    def _notify(self) -> None:
        if self.session.timer_handle is None and self._inflight is None:
            self._idle.set()
        else:
            self._idle.clear()
        if self.on_change is not None:
            self.on_change(self.session)
