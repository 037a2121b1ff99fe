from gif_search.url_utils import join_api_url, last_path_segment, view_url


def test_last_path_segment():
    assert last_path_segment("https://media.tenor.com/AbC/cat.gif") == "cat.gif"
    assert last_path_segment("https://media.tenor.com/AbC/cat.gif?x=1#f") == "cat.gif"
    assert last_path_segment("https://media.tenor.com/AbC/dir/") == "dir"
    assert last_path_segment("https://media.tenor.com/a/b%20c.gif") == "b c.gif"


def test_view_url():
    assert view_url("12345") == "https://tenor.com/view/12345"


def test_join_api_url():
    assert join_api_url("https://tenor.googleapis.com/v2/", "search") == (
        "https://tenor.googleapis.com/v2/search"
    )
    assert join_api_url("https://tenor.googleapis.com/v2", "search") == (
        "https://tenor.googleapis.com/v2/search"
    )


def test_encoded_slash_stays_in_segment():
    assert last_path_segment("https://media.tenor.com/a/b%2Fc.gif") == "b/c.gif"
    assert last_path_segment("https://media.tenor.com/%2e%2e") == ".."
    assert last_path_segment("https://media.tenor.com/") == ""
