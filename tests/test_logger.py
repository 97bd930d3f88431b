import logging

from utils.logger import TokenMaskFilter


def record(msg, *args):
    return logging.LogRecord("httpx", logging.INFO, __file__, 1, msg, args, None)


def test_token_is_masked_in_formatted_message():
    entry = record('HTTP Request: POST %s "%s"', "https://api.telegram.org/bot123:ABC/getUpdates", "200 OK")

    assert TokenMaskFilter("123:ABC").filter(entry)
    assert entry.getMessage() == 'HTTP Request: POST https://api.telegram.org/bot<bot-token>/getUpdates "200 OK"'


def test_records_without_token_are_untouched():
    entry = record("Created %s account %s", "user", "k1")
    TokenMaskFilter("123:ABC").filter(entry)
    assert entry.args == ("user", "k1")


def test_empty_secret_masks_nothing():
    entry = record("nothing to hide")
    assert TokenMaskFilter("").filter(entry)
    assert entry.getMessage() == "nothing to hide"
