"""
错误消息处理工具函数
"""


def extract_error_message(error: BaseException) -> str:
    """
    从异常中提取错误消息，用于 ProviderFailure.raw_message 和错误分类

    Args:
        error: 异常对象

    Returns:
        错误消息字符串
    """
    # 业务异常优先使用 message 属性（已经是整理过的消息）
    message = getattr(error, "message", None)
    if isinstance(message, str) and message.strip():
        return message

    # 回退到异常的字符串表示（str 可能为空，如 httpx 超时异常）
    return str(error) or repr(error)
