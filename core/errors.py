"""
Error taxonomy for the conversation loop.

Only ProviderError and NoResponseError ever leave ConversationLoop.chat().
The tool errors are raised and caught inside the loop, and their text
becomes the content of the corresponding `tool` message.
"""


class ProviderError(Exception):
    """
    Transport failure or non-success response from a model endpoint.

    The message must already be sanitized when this is constructed.

    Attributes:
        status: HTTP-like status code, 0 for transport failures
        message: Sanitized error body
    """

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"API error ({status}): {message}")


class NoResponseError(Exception):
    """The model endpoint returned no assistant turn."""

    def __init__(self, message: str = "No response from LLM"):
        super().__init__(message)


class ToolError(Exception):
    """Base class for tool failures that are fed back to the model."""

    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(message)


class UnknownToolError(ToolError):
    """Requested tool name is not in the registry."""

    def __init__(self, tool_name: str):
        super().__init__(tool_name, f'Error: Unknown tool "{tool_name}"')


class ToolArgumentDecodeError(ToolError):
    """Arguments payload is not valid for the tool's argument model."""

    def __init__(self, tool_name: str, detail: str):
        self.detail = detail
        super().__init__(tool_name, f'Error: Invalid arguments for tool "{tool_name}": {detail}')


class ToolExecutionError(ToolError):
    """The tool handler raised."""

    def __init__(self, tool_name: str, cause: BaseException):
        self.cause = cause
        super().__init__(tool_name, f'Error: Tool "{tool_name}" failed: {type(cause).__name__}: {cause}')
