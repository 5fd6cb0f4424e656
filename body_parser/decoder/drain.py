"""Streaming drain: pipes the request body through the transform chain into one buffer.

The chain is a pull-based pipeline of async generators, one per stage. The
terminal loop pulls from the last stage, which pulls from the one before it,
down to the request stream. Chunks therefore flow stage by stage in arrival
order, and the first exception raised anywhere unwinds the whole pipeline:
it is the single outcome of the drain. The buffer is only returned after the
request stream has ended and every stage has passed its end-of-stream check.
"""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, aclosing

from body_parser.core.errors import DecompressionError, DrainAborted
from body_parser.decoder.negotiation import TransformChain
from body_parser.decoder.transforms import Transform
from body_parser.models.request import IncomingRequest


async def _source(request: IncomingRequest) -> AsyncIterator[bytes]:
    """Read the raw body, turning a dropped connection into DrainAborted.

    The host may close the request without raising, so ``closed`` is checked
    after every chunk and once more when the stream ends.
    """
    try:
        async with aclosing(request.stream()) as stream:
            async for chunk in stream:
                if request.closed:
                    raise DrainAborted("Request closed while reading the request body")
                if chunk:
                    yield bytes(chunk)
    except (ConnectionError, EOFError) as ex:
        raise DrainAborted("Connection closed while reading the request body") from ex

    if request.closed:
        raise DrainAborted("Request closed before the request body was complete")


async def _pipe(upstream: AsyncIterator[bytes], transform: Transform, index: int) -> AsyncIterator[bytes]:
    """Feed every upstream chunk through one stage, then flush it."""
    async for chunk in upstream:
        try:
            output = transform.feed(chunk)
        except Exception as ex:
            raise DecompressionError(transform.label, str(ex), index) from ex
        if output:
            yield output

    try:
        tail = transform.flush()
    except Exception as ex:
        raise DecompressionError(transform.label, str(ex), index) from ex
    if tail:
        yield tail


async def drain(request: IncomingRequest, chain: TransformChain) -> bytes:
    """Drain the request body through ``chain`` and return the decoded bytes.

    Raises:
        DecompressionError: A stage rejected its input, while streaming or at end-of-stream.
        DrainAborted: The connection went away before the body was complete.
    """
    buffer = bytearray()

    async with AsyncExitStack() as stack:
        for transform in chain:
            stack.callback(transform.close)

        stream = await stack.enter_async_context(aclosing(_source(request)))
        for index, transform in enumerate(chain):
            stream = await stack.enter_async_context(aclosing(_pipe(stream, transform, index)))

        async for chunk in stream:
            buffer.extend(chunk)

    return bytes(buffer)
