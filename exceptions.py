"""
业务异常定义

服务层抛出这些异常，路由层负责转换为HTTP响应
"""


class GameLogError(Exception):
    """比赛日记相关异常的基类"""

    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(GameLogError):
    """需要登录但当前没有有效会话"""

    status_code = 401


class ValidationError(GameLogError):
    """输入校验失败：缺少必填字段、枚举值非法、评分越界"""

    status_code = 400


class RemoteStoreError(GameLogError):
    """存储层拒绝了操作：约束冲突、记录不存在或不属于当前用户"""

    status_code = 500
