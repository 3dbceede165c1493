"""User-facing detail strings shared by routes and exception handlers."""


class AuthMessages:
    INVALID_CREDENTIALS = "Incorrect email or password"
    INACTIVE_USER = "Inactive user"
    NOT_AUTHENTICATED = "Not authenticated"
    INVALID_TOKEN = "Could not validate credentials"
    INSUFFICIENT_PRIVILEGES = "Insufficient privileges"


class BlogMessages:
    NOT_FOUND = "Blog not found"


class PostMessages:
    # Denied and missing posts share this detail so responses cannot be told apart
    NOT_FOUND = "Post not found"


class UserMessages:
    NOT_FOUND = "User not found"


class AccessMessages:
    STORE_UNAVAILABLE = "Access service temporarily unavailable"
    UNKNOWN_USERS = "One or more users do not exist"
    UNKNOWN_BLOGS = "One or more blogs do not exist"


class CommentMessages:
    NOT_FOUND = "Comment not found"
    INVALID_PARENT = "Parent comment not found on this post"
