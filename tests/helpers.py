from client.stream_decoder import StreamDecoder


def split_at(data: bytes, positions) -> list[bytes]:
    """Split bytes at the given offsets."""
    chunks = []
    start = 0
    for pos in sorted(positions):
        chunks.append(data[start:pos])
        start = pos
    chunks.append(data[start:])
    return chunks


def decode_chunks(chunks) -> list[str]:
    """Run chunks through a fresh StreamDecoder, collecting every callback fragment."""
    received = []
    decoder = StreamDecoder()
    for chunk in chunks:
        received.extend(decoder.feed(chunk))
    received.extend(decoder.close())
    return received


def assert_error_body(response, status_code, with_details):
    """Assert the proxy answered with the structured `{"error": {...}}` body."""
    assert response.status_code == status_code, response.text
    error = response.json()["error"]
    assert error["message"], "error.message must not be empty"
    if with_details:
        assert error.get("details"), "error.details must not be empty"
    else:
        assert "details" not in error
