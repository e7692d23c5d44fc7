from inspect import FullArgSpec, getfile, getfullargspec, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable, Optional

from src.platform.logging.loguru_io_config import (
    DEPTH_LINE,
    MASK,
    SENSITIVE_KEYWORDS,
    GeneratorMethod,
    call_depth_var,
    chain_start_time_var,
)


# Matches `password='...'` / `"code": "..."` style fragments in repr() output
_SENSITIVE_PATTERN = re.compile(
    r"""(['"]?)\b(%s)\b(['"]?\s*[=:]\s*)(['"])(.*?)\4"""
    % '|'.join(sorted((re.escape(k) for k in SENSITIVE_KEYWORDS), key=len, reverse=True))
)
_TRUNCATE_AT = 500


def handle_yield(yield_method: Optional[GeneratorMethod] = None) -> str:
    return f'yield: {yield_method} | ' if yield_method else ''


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def fetch_layer_depth() -> str:
    return DEPTH_LINE * (call_depth_var.get() - 1)


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    target = getattr(func, '__func__', func)
    try:
        lineno = getsourcelines(target)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(target))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = call_depth_var.get() - 1
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def normalize_args_kwargs(
    func: Callable[..., Any], *args: Any, **kwargs: Any
) -> tuple[tuple[Any, ...], dict[Any, Any]]:
    """Drop extra positional/keyword arguments the wrapped function cannot accept."""
    if hasattr(func, '__wrapped__'):
        func = func.__wrapped__  # type: ignore
    full_arg_spec: FullArgSpec = getfullargspec(func)
    spec_args: list[str] = full_arg_spec.args

    if not full_arg_spec.varkw:
        kw_list: list[str] = spec_args + full_arg_spec.kwonlyargs
        kwargs = {k: v for k, v in kwargs.items() if k in kw_list}

    if not full_arg_spec.varargs:
        positional = [name for name in spec_args if name not in kwargs]
        args = args[: len(positional)]

    return args, kwargs


def mask_sensitive(data: Any) -> Any:
    if data is None or isinstance(data, int | float | bool):
        return data
    text = str(data)
    masked = _SENSITIVE_PATTERN.sub(lambda m: f'{m[1]}{m[2]}{m[3]}{m[4]}{MASK}{m[4]}', text)
    return data if masked == text else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    return MASK if keyword in SENSITIVE_KEYWORDS else value


def truncate_content(data: Any) -> Any:
    if isinstance(data, str) and len(data) > _TRUNCATE_AT:
        return f'{data[:_TRUNCATE_AT]}...(+{len(data) - _TRUNCATE_AT} chars)'
    return data
