"""
LLM client for plan generation.

This module wraps the OpenAI chat-completions API with:
- Forced tool calls for structured output
- Bounded retries with a fixed delay
- No retries on rate-limit or usage-quota errors
- Request metrics tracking
- Mapping of SDK errors onto the app's exception hierarchy
"""

from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
import asyncio
import json
import logging
import os
import time

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    APIError,
    APIStatusError,
    RateLimitError,
)

from ..config import get_settings
from ..exceptions import (
    FlowFastError,
    LLMError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Payment required: the account's usage quota is exhausted
QUOTA_EXCEEDED_STATUS = 402


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_retries: int = 2,
        delay_seconds: float = 1.0,
        non_retryable_status_codes: Optional[set[int]] = None,
    ) -> None:
        self.max_retries = max_retries
        self.delay_seconds = delay_seconds
        self.non_retryable_status_codes = non_retryable_status_codes or {QUOTA_EXCEEDED_STATUS, 429}

    def get_delay(self, attempt: int) -> float:
        """Fixed delay between attempts."""
        return self.delay_seconds


class LLMMetrics:
    """Track LLM usage metrics."""

    def __init__(self) -> None:
        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self.retried_requests = 0
        self._request_times: list[float] = []

    def record_request(
        self,
        success: bool,
        retried: bool = False,
        duration_ms: Optional[float] = None,
    ) -> None:
        self.total_requests += 1
        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1
        if retried:
            self.retried_requests += 1
        if duration_ms is not None:
            self._request_times.append(duration_ms)
            # Keep only last 100 request times
            if len(self._request_times) > 100:
                self._request_times = self._request_times[-100:]

    @property
    def avg_request_time_ms(self) -> float:
        if not self._request_times:
            return 0.0
        return sum(self._request_times) / len(self._request_times)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "retried_requests": self.retried_requests,
            "avg_request_time_ms": round(self.avg_request_time_ms, 2),
        }


class LLMClient:
    """
    OpenAI-compatible client used by the plan generator.

    Every attempt (request plus response validation) is retried up to
    ``retry_config.max_retries`` times with a fixed delay. Rate-limit and
    quota errors are raised immediately.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """
        Initialize the LLM client.

        Args:
            api_key: API key (defaults to settings or OPENAI_API_KEY)
            model: Model id (defaults to settings.llm_model)
            base_url: Optional OpenAI-compatible gateway URL
            retry_config: Configuration for retry behavior
            client: Pre-built AsyncOpenAI client (tests)

        Raises:
            LLMServiceUnavailableError: If no API key is configured
        """
        settings = get_settings()
        self.model = model or settings.llm_model
        self.retry_config = retry_config or RetryConfig(
            max_retries=settings.plan_max_retries,
            delay_seconds=settings.plan_retry_delay_seconds,
        )
        self.metrics = LLMMetrics()

        if client is not None:
            self.client = client
            return

        api_key = api_key or settings.openai_api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise LLMServiceUnavailableError(
                message="OPENAI_API_KEY not configured",
                details={"configuration_missing": "openai_api_key"},
            )
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url or settings.llm_base_url)

    def _raise_if_not_retryable(self, error: APIStatusError) -> None:
        status = error.status_code
        if status not in self.retry_config.non_retryable_status_codes:
            return
        self.metrics.record_request(success=False)
        if status == QUOTA_EXCEEDED_STATUS:
            raise LLMRateLimitError(
                message="LLM usage limit reached. Please add credits to continue.",
                details={"status_code": status},
            )
        retry_after = None
        if error.response is not None:
            header = error.response.headers.get("retry-after")
            if header and header.isdigit():
                retry_after = int(header)
        raise LLMRateLimitError(retry_after=retry_after, details={"status_code": status})

    async def _execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "LLM request",
    ) -> T:
        """
        Execute an operation with retry logic.

        Args:
            operation: Async callable to execute
            operation_name: Name for logging

        Returns:
            The operation result

        Raises:
            LLMError: On unrecoverable failure or when retries run out
        """
        last_error: Optional[FlowFastError] = None
        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            start_time = time.time()
            try:
                result = await operation()
                self.metrics.record_request(
                    success=True,
                    retried=attempt > 0,
                    duration_ms=(time.time() - start_time) * 1000,
                )
                if attempt > 0:
                    logger.info(f"{operation_name} succeeded on attempt {attempt + 1}/{attempts}")
                return result

            except RateLimitError as e:
                self._raise_if_not_retryable(e)
                last_error = LLMServiceUnavailableError(message=f"LLM API error: {e}")

            except APIConnectionError as e:
                last_error = LLMServiceUnavailableError(
                    message=f"Connection to LLM service failed: {e}",
                )

            except APIStatusError as e:
                self._raise_if_not_retryable(e)
                last_error = LLMServiceUnavailableError(
                    message=f"LLM API error: {e}",
                    details={"status_code": e.status_code},
                )

            except APIError as e:
                last_error = LLMError(message=f"LLM API error: {e}")

            except asyncio.TimeoutError:
                last_error = LLMTimeoutError(timeout_seconds=get_settings().plan_timeout_seconds)

            except LLMResponseInvalidError as e:
                last_error = e

            logger.warning(
                f"{operation_name} attempt {attempt + 1}/{attempts} failed: {last_error.message}"
            )
            if attempt < self.retry_config.max_retries:
                await asyncio.sleep(self.retry_config.get_delay(attempt))

        self.metrics.record_request(success=False, retried=attempts > 1)
        raise last_error

    async def tool_call(
        self,
        system: str,
        user: str,
        tool: Dict[str, Any],
        validate: Optional[Callable[[Dict[str, Any]], None]] = None,
        temperature: float = 0.7,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Force a single tool call and return its parsed arguments.

        Args:
            system: System prompt
            user: User message
            tool: Function schema ({"name", "description", "parameters"})
            validate: Optional check run on the arguments; raising
                LLMResponseInvalidError makes the attempt retryable
            temperature: Sampling temperature
            timeout: Request timeout in seconds (defaults to settings)

        Returns:
            The tool call arguments as a dictionary

        Raises:
            LLMError: On failure after retries
        """
        timeout = timeout or get_settings().plan_timeout_seconds
        tool_name = tool["name"]

        async def _make_request() -> Dict[str, Any]:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    tools=[{"type": "function", "function": tool}],
                    tool_choice={"type": "function", "function": {"name": tool_name}},
                    temperature=temperature,
                ),
                timeout=timeout,
            )
            if not response.choices:
                raise LLMResponseInvalidError(message="Empty response from LLM")
            tool_calls = response.choices[0].message.tool_calls or []
            if not tool_calls or tool_calls[0].function.name != tool_name:
                raise LLMResponseInvalidError(message="LLM did not return a valid tool call")

            raw_arguments = tool_calls[0].function.arguments
            try:
                arguments = json.loads(raw_arguments)
            except json.JSONDecodeError as e:
                raise LLMResponseInvalidError(
                    message=f"Invalid JSON in tool call arguments: {e}",
                    raw_response=raw_arguments,
                )
            if not isinstance(arguments, dict):
                raise LLMResponseInvalidError(
                    message="Tool call arguments are not an object",
                    raw_response=raw_arguments,
                )
            if validate is not None:
                validate(arguments)
            return arguments

        return await self._execute_with_retry(_make_request, tool_name)

    def get_model_name(self) -> str:
        return self.model
