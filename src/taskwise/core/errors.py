"""TaskWise 异常体系

核心规则判定的结果以类型化异常返回，code 字段稳定，供网关层映射为 HTTP 响应。
NotFoundError 不泄露资源存在信息；PermissionDeniedError 仅在资源确认存在后抛出。
"""


class TaskWiseError(Exception):
    """TaskWise 基础异常"""

    code: str = "TASKWISE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TaskWiseError):
    """资源 ID 无法解析"""

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str, message: str | None = None) -> None:
        """
        Args:
            resource: 资源类型名（Project / Task / User）
            resource_id: 请求的资源 ID
            message: 自定义描述，默认 "<resource> not found"
        """
        super().__init__(message or f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id
        self.code = f"{resource.upper()}_NOT_FOUND"


class UserNotFoundError(NotFoundError):
    """成员标识无法解析为已注册用户"""

    def __init__(self, identifier: str, message: str = "User not found") -> None:
        super().__init__("User", identifier, message)


class PermissionDeniedError(TaskWiseError):
    """资源存在，但调用方缺少所需关系"""

    code = "PERMISSION_DENIED"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class AlreadyMemberError(TaskWiseError):
    """用户已是项目成员"""

    code = "ALREADY_MEMBER"

    def __init__(self, user_id: str) -> None:
        super().__init__("User is already a member")
        self.user_id = user_id


class CannotRemoveOwnerError(TaskWiseError):
    """不能从成员中移除 owner"""

    code = "CANNOT_REMOVE_OWNER"

    def __init__(self) -> None:
        super().__init__("Cannot remove project owner")


class EmailAlreadyRegisteredError(TaskWiseError):
    """注册邮箱已存在"""

    code = "EMAIL_ALREADY_REGISTERED"

    def __init__(self) -> None:
        super().__init__("User with this email already exists")


class AuthenticationError(TaskWiseError):
    """凭证缺失、无效或过期"""

    code = "AUTHENTICATION_FAILED"


class UpstreamError(TaskWiseError):
    """身份存储 / 资源存储调用本身失败

    不做重试，由调用方记录日志并返回通用服务端错误。
    """

    code = "UPSTREAM_FAILURE"

    def __init__(self, operation: str, original_error: Exception) -> None:
        """
        Args:
            operation: 失败的存储操作名
            original_error: 原始异常
        """
        super().__init__(f"Storage operation failed: {operation}")
        self.operation = operation
        self.original_error = original_error
