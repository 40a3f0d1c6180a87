from labour_system.common.pagination import Page, PageRequest


def test_page_request_falls_back_to_defaults():
    assert PageRequest.from_params({"page": "0", "limit": "abc"}) == PageRequest(page=1, limit=20)
    assert PageRequest.from_params({"page": "-3"}) == PageRequest(page=1, limit=20)
    assert PageRequest.from_params(None) == PageRequest(page=1, limit=20)


def test_page_size_alias_and_skip():
    request = PageRequest.from_params({"page": "3", "pageSize": "10"})
    assert request == PageRequest(page=3, limit=10)
    assert request.skip == 20


def test_meta_reports_totals():
    page = Page(items=["a", "b", "c"], total=23, request=PageRequest(page=3, limit=10))
    assert page.meta() == {"total": 23, "totalPages": 3, "currentPage": 3, "pageSize": 3}


def test_empty_result_has_zero_pages():
    page = Page(items=[], total=0, request=PageRequest())
    assert page.meta()["totalPages"] == 0
    assert page.map(str).items == []
