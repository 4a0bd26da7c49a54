"""Step definitions for walking a journey over HTTP."""

from __future__ import annotations

from behave import given, then, when


def _step_url(context, step: str) -> str:
    return f"/journeys/{context.slug}/cases/{context.case_ref}/steps/{step}"


def _json(context) -> dict:
    try:
        return context.response.json()
    except ValueError:
        raise AssertionError(f"Response is not JSON: {context.response.text[:200]}") from None


@given('a new case "{case_ref}" on the "{slug}" journey')
def step_new_case(context, case_ref, slug):
    context.slug = slug
    context.case_ref = case_ref + context.case_suffix


@given('I ask for content in "{lang}"')
def step_language(context, lang):
    context.params = {"lang": lang}


@when('I open the "{step}" step')
def step_open(context, step):
    context.response = context.client.get(_step_url(context, step), params=context.params)


@when('I submit the "{step}" step with:')
def step_submit(context, step):
    body = {}
    for row in context.table or []:
        body.setdefault(row["field"], []).append(row["value"])
    data = {key: values if len(values) > 1 else values[0] for key, values in body.items()}
    context.response = context.client.post(_step_url(context, step), data=data, params=context.params)


@then("the response status is {status:d}")
def step_status(context, status):
    assert context.response.status_code == status, (
        f"expected {status}, got {context.response.status_code}: {context.response.text[:300]}"
    )


@then('I am redirected to the "{step}" step')
def step_redirected_to_step(context, step):
    step_status(context, 303)
    assert context.response.headers["location"] == _step_url(context, step)


@then('the response redirects to "{url}"')
def step_redirects_to(context, url):
    assert context.response.headers["location"] == url


@then('the error for "{path}" is "{message}"')
def step_error_message(context, path, message):
    errors = _json(context).get("errors") or {}
    assert errors.get(path) == message, f"errors were {errors}"


@then('the error summary links to "{href}"')
def step_summary_link(context, href):
    summary = _json(context).get("error_summary") or {}
    hrefs = [item["href"] for item in summary.get("error_list", [])]
    assert href in hrefs, f"summary links were {hrefs}"


@then('the back link points to the "{step}" step')
def step_back_link(context, step):
    assert _json(context)["back_url"] == _step_url(context, step)


@then('the page title is "{title}"')
def step_page_title(context, title):
    assert _json(context)["page_title"] == title
