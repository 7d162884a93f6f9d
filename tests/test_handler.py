"""
Tests for the Parameter Store Lambda handlers.
"""
import os
import sys
from unittest.mock import Mock

import boto3
import pytest
from moto import mock_aws

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import config
import handler
from utils.decorators import lambda_handler


@pytest.fixture
def mock_context():
    """Mock Lambda context."""
    class MockContext:
        def __init__(self):
            self.function_name = 'dev-config-direct_parameters'
            self.memory_limit_in_mb = 128
            self.invoked_function_arn = 'arn:aws:lambda:us-east-1:123456789012:function:test'
            self.aws_request_id = 'test-request-id'

    return MockContext()


@pytest.fixture
def ssm(monkeypatch):
    """In-memory SSM with config and the cached service reset."""
    monkeypatch.setenv('AWS_REGION', 'us-east-1')
    monkeypatch.setenv('SSM_ENCRYPTED', 'true')
    monkeypatch.setattr(config, '_config', None)
    monkeypatch.setattr(handler, '_parameter_store', None)

    with mock_aws():
        client = boto3.client('ssm', region_name='us-east-1')
        client.put_parameter(Name='/billing/dev/url', Value='https://a', Type='String')
        client.put_parameter(Name='/billing/dev/db/host', Value='db.local', Type='String')
        yield client


@pytest.mark.handlers
def test_get_parameter(ssm, mock_context):
    response = handler.get_parameter({'key': '/billing/dev/url'}, mock_context)

    assert response['key'] == '/billing/dev/url'
    assert response['value'] == 'https://a'
    assert 'correlation_id' in response['metadata']


@pytest.mark.handlers
def test_get_parameter_missing_key_is_400(ssm, mock_context):
    response = handler.get_parameter({}, mock_context)

    assert response['error']['type'] == 'InvalidInputError'
    assert response['error']['status'] == 400


@pytest.mark.handlers
def test_get_parameter_not_found_is_404(ssm, mock_context):
    response = handler.get_parameter({'key': '/billing/dev/missing'}, mock_context)

    assert response['error']['type'] == 'ParameterNotFoundError'
    assert response['error']['status'] == 404


@pytest.mark.handlers
def test_get_parameters_by_path(ssm, mock_context):
    response = handler.get_parameters_by_path({'path': 'billing/dev'}, mock_context)

    assert response['parameters'] == {
        '/billing/dev/url': 'https://a',
        '/billing/dev/db/host': 'db.local',
    }
    assert response['errors'] == []


@pytest.mark.handlers
def test_get_parameters_by_path_non_recursive(ssm, mock_context):
    response = handler.get_parameters_by_path(
        {'path': '/billing/dev', 'recursive': False}, mock_context
    )

    assert response['parameters'] == {'/billing/dev/url': 'https://a'}


@pytest.mark.handlers
def test_get_parameters(ssm, mock_context):
    response = handler.get_parameters(
        {'keys': ['/billing/dev/url', '/billing/dev/nope']}, mock_context
    )

    assert response['parameters'] == {'/billing/dev/url': 'https://a'}
    assert response['invalid'] == ['/billing/dev/nope']


@pytest.mark.handlers
def test_get_parameters_without_keys_is_400(ssm, mock_context):
    response = handler.get_parameters({}, mock_context)

    assert response['error']['status'] == 400


@pytest.mark.handlers
def test_put_parameter_conflict_then_overwrite(ssm, mock_context):
    event = {'key': '/billing/dev/url', 'value': 'https://b'}

    conflict = handler.put_parameter(event, mock_context)
    assert conflict['error']['type'] == 'ParameterConflictError'
    assert conflict['error']['status'] == 409

    overwritten = handler.put_parameter(dict(event, overwrite=True), mock_context)
    assert overwritten['previous'] == 'https://a'
    assert ssm.get_parameter(Name='/billing/dev/url')['Parameter']['Value'] == 'https://b'


@pytest.mark.handlers
def test_put_parameter_creates(ssm, mock_context):
    response = handler.put_parameter(
        {'key': '/billing/dev/new', 'value': 'fresh'}, mock_context
    )

    assert response['previous'] == ''
    assert ssm.get_parameter(Name='/billing/dev/new')['Parameter']['Value'] == 'fresh'


@pytest.mark.handlers
def test_delete_parameter(ssm, mock_context):
    response = handler.delete_parameter({'key': '/billing/dev/url'}, mock_context)
    assert response['previous'] == 'https://a'

    again = handler.delete_parameter({'key': '/billing/dev/url'}, mock_context)
    assert again['error']['status'] == 404


@pytest.mark.handlers
def test_put_parameter_string_false_does_not_overwrite(ssm, mock_context):
    response = handler.put_parameter(
        {'key': '/billing/dev/url', 'value': 'https://b', 'overwrite': 'false'}, mock_context
    )

    assert response['error']['type'] == 'ParameterConflictError'
    assert response['error']['status'] == 409
    assert ssm.get_parameter(Name='/billing/dev/url')['Parameter']['Value'] == 'https://a'


@pytest.mark.handlers
def test_put_parameter_string_true_overwrites(ssm, mock_context):
    response = handler.put_parameter(
        {'key': '/billing/dev/url', 'value': 'https://b', 'overwrite': 'True'}, mock_context
    )

    assert response['previous'] == 'https://a'
    assert ssm.get_parameter(Name='/billing/dev/url')['Parameter']['Value'] == 'https://b'


@pytest.mark.handlers
@pytest.mark.parametrize('overwrite', ['sometimes', 1, None, ['true']])
def test_put_parameter_invalid_overwrite_is_400(ssm, mock_context, overwrite):
    response = handler.put_parameter(
        {'key': '/billing/dev/url', 'value': 'https://b', 'overwrite': overwrite}, mock_context
    )

    assert response['error']['type'] == 'InvalidInputError'
    assert response['error']['status'] == 400
    assert ssm.get_parameter(Name='/billing/dev/url')['Parameter']['Value'] == 'https://a'


@pytest.mark.handlers
def test_get_parameters_by_path_string_false_is_non_recursive(ssm, mock_context):
    response = handler.get_parameters_by_path(
        {'path': '/billing/dev', 'recursive': 'false'}, mock_context
    )

    assert response['parameters'] == {'/billing/dev/url': 'https://a'}


@pytest.mark.handlers
def test_get_parameters_by_path_invalid_recursive_is_400(ssm, mock_context):
    response = handler.get_parameters_by_path(
        {'path': '/billing/dev', 'recursive': 'deep'}, mock_context
    )

    assert response['error']['type'] == 'InvalidInputError'
    assert response['error']['status'] == 400


@pytest.mark.handlers
@pytest.mark.parametrize('keys', ['/billing/dev/url', {'k': '/billing/dev/url'}, ['/billing/dev/url', 3]])
def test_get_parameters_rejects_non_list_keys(ssm, mock_context, keys):
    response = handler.get_parameters({'keys': keys}, mock_context)

    assert response['error']['type'] == 'InvalidInputError'
    assert response['error']['status'] == 400


@pytest.mark.handlers
def test_parameter_store_uses_config(ssm):
    store = handler.get_parameter_store()

    assert store.is_encrypted is True
    assert handler.get_parameter_store() is store


@pytest.mark.handlers
class TestLambdaHandlerDecorator:
    """Tests for response shaping by the lambda_handler decorator."""

    def test_wraps_list_result(self):
        wrapped = lambda_handler(lambda event, context: ['a', 'b'])
        response = wrapped({}, None)

        assert response['result'] == ['a', 'b']
        assert 'correlation_id' in response['metadata']

    def test_wraps_scalar_result(self):
        wrapped = lambda_handler(lambda event, context: 3)
        assert wrapped({}, None)['data'] == 3

    def test_unexpected_error_is_500(self):
        def boom(event, context):
            raise RuntimeError('kaboom')

        response = lambda_handler(boom)({}, Mock(aws_request_id='req-1'))

        assert response['error']['type'] == 'RuntimeError'
        assert response['error']['status'] == 500
        assert response['error']['message'] == 'kaboom'
        assert response['metadata']['handler'] == 'boom'
