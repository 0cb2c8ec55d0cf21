import pytest

from requested_fields.tests.helper import exec_query

USERS_QUERY = """
query UsersQuery($withPageInfo: Boolean!) {
  viewer {
    users {
      ...PageInfo
      ...UserData
    }
  }
}
fragment PageInfo on UserConnection {
  pageInfo @include(if: $withPageInfo) {
    startCursor
    endCursor
    hasNextPage @skip(if: false)
  }
}
fragment UserContacts on User {
  phoneNumber
  email
}
fragment UserData on UserConnection {
  edges {
    node {
      id
      firstName
      lastName
      ...UserContacts
    }
  }
}
"""


@pytest.fixture
def users_info():
    return exec_query(USERS_QUERY, {"withPageInfo": True})


@pytest.fixture
def users_info_without_page_info():
    return exec_query(USERS_QUERY, {"withPageInfo": False})
