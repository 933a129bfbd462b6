from .feishu import FeishuClient

__all__ = ["FeishuClient"]
