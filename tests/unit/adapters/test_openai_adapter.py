import pytest
from unittest.mock import AsyncMock, Mock, patch
from openai import OpenAIError
from pydantic import BaseModel

from onchain_agent.adapters.openai_adapter import OpenAIAdapter
from onchain_agent.services.agent import ToolCall

# Test Models


class Verdict(BaseModel):
    message: str
    confidence: float

# Fixtures


@pytest.fixture
def mock_openai():
    with patch('onchain_agent.adapters.openai_adapter.AsyncOpenAI') as mock:
        client = mock.return_value
        client.responses.create = AsyncMock()
        client.chat.completions.create = AsyncMock()
        yield mock


@pytest.fixture
def adapter(mock_openai):
    return OpenAIAdapter(api_key="test-key", model="gpt-4.1-mini")

# Tests


def test_default_models(mock_openai):
    adapter = OpenAIAdapter(api_key="test-key")
    assert adapter.text_model == "gpt-4.1"
    assert adapter.parse_model == "gpt-4.1"
    mock_openai.assert_called_once_with(api_key="test-key")


@pytest.mark.asyncio
async def test_generate_text(adapter, mock_openai):
    mock_openai.return_value.responses.create.return_value = Mock(output_text="Hello!")

    result = await adapter.generate_text("Hi there", system_prompt="Be brief")

    assert result == "Hello!"
    call_kwargs = mock_openai.return_value.responses.create.call_args[1]
    assert call_kwargs["model"] == "gpt-4.1-mini"
    assert call_kwargs["instructions"] == "Be brief"
    assert call_kwargs["input"] == "Hi there"


@pytest.mark.asyncio
async def test_parse_structured_output(adapter, mock_openai):
    mock_openai.return_value.responses.create.return_value = Mock(
        output_text='{"tool_name": "swap_quote", "arguments": "{}"}'
    )

    result = await adapter.parse_structured_output(
        "swap 1 BNB", "Pick a tool", ToolCall
    )

    assert result == ToolCall(tool_name="swap_quote", arguments="{}")
    text_format = mock_openai.return_value.responses.create.call_args[1]["text"]["format"]
    assert text_format["type"] == "json_schema"
    assert text_format["strict"] is True
    assert text_format["name"] == "ToolCall"


@pytest.mark.asyncio
async def test_parse_structured_output_fallback(adapter, mock_openai):
    mock_openai.return_value.responses.create.side_effect = OpenAIError("unsupported")
    completion = Mock()
    completion.choices = [Mock()]
    completion.choices[0].message.content = '{"message": "ok", "confidence": 0.9}'
    mock_openai.return_value.chat.completions.create.return_value = completion

    result = await adapter.parse_structured_output("Hi", "Judge", Verdict)

    assert result.confidence == 0.9
    call_kwargs = mock_openai.return_value.chat.completions.create.call_args[1]
    assert call_kwargs["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_parse_structured_output_total_failure(adapter, mock_openai):
    mock_openai.return_value.responses.create.side_effect = OpenAIError("unsupported")
    mock_openai.return_value.chat.completions.create.side_effect = OpenAIError("down")

    with pytest.raises(ValueError):
        await adapter.parse_structured_output("Hi", "Judge", Verdict)


@patch('onchain_agent.adapters.openai_adapter.logfire')
def test_logfire_instrumentation(mock_logfire, mock_openai):
    adapter = OpenAIAdapter(api_key="test-key", logfire_api_key="lf-key")

    assert adapter.logfire is True
    mock_logfire.configure.assert_called_once_with(token="lf-key")
    mock_logfire.instrument_openai.assert_called_once_with(mock_openai.return_value)


@patch('onchain_agent.adapters.openai_adapter.logfire')
def test_logfire_failure_is_not_fatal(mock_logfire, mock_openai):
    mock_logfire.configure.side_effect = Exception("bad token")

    adapter = OpenAIAdapter(api_key="test-key", logfire_api_key="lf-key")

    assert adapter.logfire is False


@pytest.mark.asyncio
async def test_invalid_strict_output_falls_back_to_json_mode(adapter, mock_openai):
    mock_openai.return_value.responses.create.return_value = Mock(output_text="not json")
    completion = Mock()
    completion.choices = [Mock()]
    completion.choices[0].message.content = '{"tool_name": "none", "arguments": "{}"}'
    mock_openai.return_value.chat.completions.create.return_value = completion

    result = await adapter.parse_structured_output("hello", "Pick a tool", ToolCall)

    assert result.tool_name == "none"
    system_message = mock_openai.return_value.chat.completions.create.call_args[1][
        "messages"
    ][0]["content"]
    assert system_message.startswith("Pick a tool")
    assert '"tool_name"' in system_message
