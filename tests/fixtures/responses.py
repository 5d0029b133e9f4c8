import json

COMPLETION_RESPONSE = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "model": "deepseek-chat",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Focus on measurable outcomes in your CV."},
            "finish_reason": "stop"
        }
    ],
    "usage": {"prompt_tokens": 12, "completion_tokens": 9, "total_tokens": 21}
}

NOT_FOUND_RESPONSE = {
    "error": {"message": "Model Not Exist", "type": "invalid_request_error"}
}


def delta_frame(content, role=None):
    """One SSE data line carrying a text delta."""
    delta = {"content": content}
    if role:
        delta["role"] = role
    return "data: " + json.dumps({"choices": [{"index": 0, "delta": delta}]}, ensure_ascii=False) + "\n\n"


DELTAS = ["Hello", ", ", "I'm your ", "coach. ", "Let's polish ", "your CV ✨", " à bientôt"]

SSE_BODY = (
    ": keep-alive\n\n"
    + delta_frame("", role="assistant")
    + "".join(delta_frame(d) for d in DELTAS)
    + "data: [DONE]\n\n"
)
