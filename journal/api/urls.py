from django.urls import path

from .views import accounts, articles, users

app_name = "api"

urlpatterns = [
    path("health/", accounts.health, name="health"),
    # Accounts
    path("auth/register/", accounts.register, name="register"),
    path("auth/login/", accounts.login, name="login"),
    path("auth/me/", accounts.me, name="me"),
    path("auth/profile/", accounts.update_profile, name="profile"),
    path("auth/change-password/", accounts.change_password, name="change_password"),
    # Articles
    path("articles/", articles.article_collection, name="articles"),
    path("articles/my-articles/", articles.my_articles, name="my_articles"),
    path("articles/preview/", articles.preview, name="article_preview"),
    path("articles/<str:ref>/", articles.article_detail, name="article_detail"),
    path("articles/<str:ref>/render/", articles.render_article, name="article_render"),
    path("articles/<str:ref>/like/", articles.toggle_like, name="article_like"),
    path("articles/<str:ref>/comments/", articles.add_comment, name="article_comments"),
    path(
        "articles/<str:ref>/comments/<int:comment_id>/",
        articles.delete_comment,
        name="article_comment_detail",
    ),
    # Users
    path("users/", users.user_list, name="users"),
    path("users/search/", users.user_search, name="user_search"),
    path("users/<int:user_id>/", users.user_detail, name="user_detail"),
    path("users/<int:user_id>/articles/", users.user_articles, name="user_articles"),
    path("users/<int:user_id>/follow/", users.follow, name="user_follow"),
    path("users/<int:user_id>/followers/", users.followers, name="user_followers"),
    path("users/<int:user_id>/following/", users.following, name="user_following"),
    path(
        "users/<int:user_id>/follow-status/",
        users.follow_status,
        name="user_follow_status",
    ),
    path(
        "users/username/<str:username>/",
        users.user_by_username,
        name="user_by_username",
    ),
    path(
        "users/username/<str:username>/articles/",
        users.user_articles_by_username,
        name="user_articles_by_username",
    ),
]
