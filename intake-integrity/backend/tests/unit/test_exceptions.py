"""
Unit tests for exception classes.

不需要数据库，纯 Python 测试：
1. BaseAppException 默认值
2. 各子类的默认 type / code / http_status
3. 构造时覆盖 code / http_status
4. detail 可选，to_dict() 只在有 detail 时输出
"""
from integrity.exceptions import (
    BaseAppException,
    ValidationError,
    BlockError,
    WarningError,
    StoreError,
)


class TestBaseAppException:

    def test_defaults(self):
        exc = BaseAppException('something broke')
        assert exc.message == 'something broke'
        assert exc.type == 'error'
        assert exc.code == 'UNKNOWN_ERROR'
        assert exc.http_status == 500
        assert exc.detail is None

    def test_override_code_and_status(self):
        exc = BaseAppException('bad', code='CUSTOM_CODE', http_status=418)
        assert exc.code == 'CUSTOM_CODE'
        assert exc.http_status == 418

    def test_detail_preserved(self):
        exc = BaseAppException('bad', detail={'key': 'value'})
        assert exc.detail == {'key': 'value'}

    def test_to_dict_omits_missing_detail(self):
        body = BlockError('blocked').to_dict()
        assert body == {'type': 'block', 'code': 'BUSINESS_BLOCK', 'message': 'blocked'}

    def test_to_dict_includes_detail(self):
        body = BlockError('blocked', code='DUPLICATE_PATIENT', detail={'mrn': '123456'}).to_dict()
        assert body['code'] == 'DUPLICATE_PATIENT'
        assert body['detail'] == {'mrn': '123456'}


class TestValidationError:

    def test_defaults(self):
        exc = ValidationError('bad input')
        assert exc.type == 'validation_error'
        assert exc.code == 'VALIDATION_ERROR'
        assert exc.http_status == 400

    def test_custom_code(self):
        exc = ValidationError('npi invalid', code='INVALID_NPI')
        assert exc.code == 'INVALID_NPI'
        assert exc.http_status == 400  # status 没变


class TestBlockError:

    def test_defaults(self):
        exc = BlockError('blocked')
        assert exc.type == 'block'
        assert exc.code == 'BUSINESS_BLOCK'
        assert exc.http_status == 409


class TestWarningError:

    def test_defaults(self):
        exc = WarningError('needs confirm')
        assert exc.type == 'warning'
        assert exc.code == 'CONFIRMATION_REQUIRED'
        assert exc.http_status == 409

    def test_with_warnings_detail(self):
        exc = WarningError(
            'needs confirm',
            detail={'warnings': [{'type': 'SIMILAR_PATIENT', 'message': 'y'}]},
        )
        assert exc.detail['warnings'][0]['type'] == 'SIMILAR_PATIENT'


class TestStoreError:

    def test_defaults(self):
        exc = StoreError('database down')
        assert exc.type == 'infrastructure'
        assert exc.code == 'STORE_UNAVAILABLE'
        assert exc.http_status == 503

    def test_is_app_exception(self):
        assert isinstance(StoreError('x'), BaseAppException)
