import warnings

from quantity_taxonomy.http import HttpClientFactory, transient_retrying


def test_client_uses_configured_read_timeout():
    client = HttpClientFactory.client(headers={"Accept": "application/json"}, read_timeout=5.0)
    assert client.timeout.read == 5.0
    assert client.timeout.connect == 10.0
    assert client.headers["accept"] == "application/json"


def test_retry_policy_builds_without_deprecation_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        policy = transient_retrying(4)
    assert policy.stop.max_attempt_number == 4
