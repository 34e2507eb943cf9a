"""GraphQL documents sent to the GitHub API."""

from __future__ import annotations

_AUTHOR = "author { login avatarUrl }"

_PR_FIELDS = f"""
        number
        title
        state
        isDraft
        {_AUTHOR}
        headRefName
        baseRefName
        reviewDecision
        labels(first: 10) {{
          nodes {{
            name
          }}
        }}
        additions
        deletions
        createdAt
        updatedAt
        url
        body
"""

# List views only need counts; individual checks are fetched with the detail query.
_CHECK_COUNTS = """
        commits(last: 1) {
          nodes {
            commit {
              statusCheckRollup {
                state
                contexts(first: 1) {
                  totalCount
                  checkRunCountsByState { state count }
                  statusContextCountsByState { state count }
                }
              }
            }
          }
        }
"""

PR_LIST = f"""
query($owner: String!, $repo: String!, $states: [PullRequestState!], $first: Int!) {{
  repository(owner: $owner, name: $repo) {{
    pullRequests(states: $states, first: $first, orderBy: {{field: UPDATED_AT, direction: DESC}}) {{
      nodes {{
{_PR_FIELDS}
{_CHECK_COUNTS}
      }}
    }}
  }}
}}
"""

PR_SEARCH = f"""
query($searchQuery: String!, $first: Int!) {{
  search(query: $searchQuery, type: ISSUE, first: $first) {{
    nodes {{
      ... on PullRequest {{
{_PR_FIELDS}
{_CHECK_COUNTS}
      }}
    }}
  }}
}}
"""

PR_DETAIL = f"""
query($owner: String!, $repo: String!, $number: Int!) {{
  repository(owner: $owner, name: $repo) {{
    pullRequest(number: $number) {{
      id
{_PR_FIELDS}
      commits(last: 1) {{
        nodes {{
          commit {{
            statusCheckRollup {{
              state
              contexts(first: 100) {{
                totalCount
                pageInfo {{ hasNextPage endCursor }}
                nodes {{
                  __typename
                  ... on CheckRun {{
                    name
                    status
                    conclusion
                    detailsUrl
                    startedAt
                    completedAt
                    checkSuite {{ app {{ name }} }}
                  }}
                  ... on StatusContext {{
                    context
                    state
                    targetUrl
                    description
                    createdAt
                  }}
                }}
              }}
            }}
          }}
        }}
      }}
      comments(first: 100) {{
        nodes {{
          id
          databaseId
          {_AUTHOR}
          body
          createdAt
          updatedAt
        }}
      }}
      reviews(first: 100) {{
        nodes {{
          id
          databaseId
          {_AUTHOR}
          state
          body
          submittedAt
          comments(first: 100) {{
            nodes {{
              id
              databaseId
              {_AUTHOR}
              body
              path
              line
              createdAt
              updatedAt
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""

PR_REVIEW_THREADS = f"""
query($owner: String!, $repo: String!, $number: Int!) {{
  repository(owner: $owner, name: $repo) {{
    pullRequest(number: $number) {{
      id
      reviewThreads(first: 100) {{
        nodes {{
          id
          isResolved
          isOutdated
          path
          line
          originalLine
          startLine
          diffSide
          comments(first: 100) {{
            nodes {{
              id
              databaseId
              {_AUTHOR}
              body
              path
              line
              createdAt
              updatedAt
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""

PR_CHECKS_PAGE = """
query($owner: String!, $repo: String!, $number: Int!, $after: String!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $number) {
      commits(last: 1) {
        nodes {
          commit {
            statusCheckRollup {
              state
              contexts(first: 100, after: $after) {
                pageInfo { hasNextPage endCursor }
                nodes {
                  __typename
                  ... on CheckRun {
                    name
                    status
                    conclusion
                    detailsUrl
                    startedAt
                    completedAt
                    checkSuite { app { name } }
                  }
                  ... on StatusContext {
                    context
                    state
                    targetUrl
                    description
                    createdAt
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

VIEWER = """
query {
  viewer {
    login
  }
}
"""

ADD_PULL_REQUEST_REVIEW = """
mutation($pullRequestId: ID!, $event: PullRequestReviewEvent!, $body: String) {
  addPullRequestReview(input: {pullRequestId: $pullRequestId, event: $event, body: $body}) {
    pullRequestReview {
      id
      state
      url
    }
  }
}
"""

ADD_PULL_REQUEST_REVIEW_WITH_THREADS = """
mutation(
  $pullRequestId: ID!,
  $event: PullRequestReviewEvent!,
  $body: String,
  $threads: [DraftPullRequestReviewThread]
) {
  addPullRequestReview(
    input: {pullRequestId: $pullRequestId, event: $event, body: $body, threads: $threads}
  ) {
    pullRequestReview {
      id
      state
      url
    }
  }
}
"""

__all__ = [
    "ADD_PULL_REQUEST_REVIEW",
    "ADD_PULL_REQUEST_REVIEW_WITH_THREADS",
    "PR_CHECKS_PAGE",
    "PR_DETAIL",
    "PR_LIST",
    "PR_REVIEW_THREADS",
    "PR_SEARCH",
    "VIEWER",
]
