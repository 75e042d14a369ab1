import json
import unittest

import httpx

from models.models import TranslationRequest
from translator.chat_client import ChatProxyClient, TranslationError
from translator.prompt import build_system_prompt


def make_client(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChatProxyClient("http://proxy.test/", http_client=http_client)


REQUEST = TranslationRequest(
    source_language="en",
    target_language="ja",
    source_text="Where is the station?",
)


class TestSystemPrompt(unittest.TestCase):
    def test_prompt_names_both_languages(self):
        prompt = build_system_prompt("English", "Japanese")
        self.assertIn("from English to Japanese", prompt)
        self.assertIn("ONLY return the direct translation", prompt)
        self.assertIn("do not answer it", prompt)


class TestChatProxyClient(unittest.IsolatedAsyncioTestCase):
    async def test_posts_two_message_payload(self):
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200, json={"choices": [{"message": {"content": "駅はどこですか？\n"}}]}
            )

        client = make_client(handler)
        result = await client.translate(REQUEST)

        self.assertEqual(result, "駅はどこですか？")
        self.assertEqual(str(captured[0].url), "http://proxy.test/api/chat")
        body = json.loads(captured[0].content)
        self.assertEqual(body["model"], "meta-llama/Llama-3.1-8B-Instruct")
        self.assertEqual(body["temperature"], 0.2)
        self.assertEqual(body["top_p"], 0.95)
        self.assertEqual(body["max_tokens"], 2048)
        self.assertEqual(
            body["messages"],
            [
                {"role": "system", "content": build_system_prompt("English", "Japanese")},
                {"role": "user", "content": "Where is the station?"},
            ],
        )
        await client.http_client.aclose()

    async def test_proxy_error_message(self):
        def handler(request):
            return httpx.Response(
                500, json={"error": "Server configuration error", "details": ""}
            )

        client = make_client(handler)
        with self.assertRaises(TranslationError) as ctx:
            await client.translate(REQUEST)
        self.assertEqual(str(ctx.exception), "API error: Server configuration error")

    async def test_proxy_error_without_json_uses_reason(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        client = make_client(handler)
        with self.assertRaises(TranslationError) as ctx:
            await client.translate(REQUEST)
        self.assertEqual(str(ctx.exception), "API error: Bad Gateway")

    async def test_unexpected_shape(self):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        client = make_client(handler)
        with self.assertRaises(TranslationError) as ctx:
            await client.translate(REQUEST)
        self.assertEqual(
            str(ctx.exception), "Invalid response format from translation service"
        )


if __name__ == "__main__":
    unittest.main()
