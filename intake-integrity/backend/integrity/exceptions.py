"""
统一异常体系。

所有业务异常继承 BaseAppException，包含：
- type:        错误类型标识（validation_error / block / warning / infrastructure）
- code:        业务错误码（INVALID_NPI / DUPLICATE_PATIENT / STORE_UNAVAILABLE / ...）
- message:     人类可读的描述
- detail:      可选的附加信息（dict / list / None）
- http_status: 建议的 HTTP 状态码，由调用方的 API 层决定是否采用

service 层只需 raise，调用方统一捕获并格式化响应。
"""


class BaseAppException(Exception):
    """所有业务异常的基类。"""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)

    def to_dict(self):
        body = {
            'type': self.type,
            'code': self.code,
            'message': self.message,
        }
        if self.detail is not None:
            body['detail'] = self.detail
        return body


class ValidationError(BaseAppException):
    """输入验证失败（NPI / ICD-10 格式或校验位），400。"""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400


class BlockError(BaseAppException):
    """业务规则阻止操作（例如 MRN 已存在），409。"""

    type = 'block'
    code = 'BUSINESS_BLOCK'
    http_status = 409


class WarningError(BaseAppException):
    """
    业务警告，需要用户确认后继续。

    与其他异常不同，WarningError 不代表"失败"，而是"暂停"。
    detail['warnings'] 是 IntegrityWarning.to_dict() 的列表，
    用户确认后带 confirm=True 重新提交。
    """

    type = 'warning'
    code = 'CONFIRMATION_REQUIRED'
    http_status = 409


class StoreError(BaseAppException):
    """
    记录存储不可用（连库失败、查询出错）。

    查重时绝不能把这种情况当成"没有重复"，必须向上抛。
    """

    type = 'infrastructure'
    code = 'STORE_UNAVAILABLE'
    http_status = 503
