"""Tests for category, store and review endpoints."""


def test_list_categories(client, seed):
    """Test categories are listed by name."""
    seed.category("Shoes")
    seed.category("Coats")

    response = client.get("/api/v1/categories/")

    assert response.status_code == 200
    assert [c["name"] for c in response.json()["categories"]] == ["Coats", "Shoes"]


def test_category_products(client, seed):
    """Test listing products of a category with a price range."""
    store = seed.store()
    boots = seed.category("Boots")
    seed.product(store, name="Work Boot", price=40, categories=[boots])
    seed.product(store, name="Cheap Boot", price=5, categories=[boots])
    seed.product(store, name="Rain Coat", price=40)

    response = client.get(f"/api/v1/categories/{boots.id}/products?minPrice=10")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["products"]] == ["Work Boot"]


def test_category_not_found_differs_from_no_match(client, seed):
    """Test a missing category is 404 while an empty category is 200."""
    empty = seed.category("Empty")

    missing = client.get("/api/v1/categories/999/products")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Category not found"

    no_match = client.get(f"/api/v1/categories/{empty.id}/products")
    assert no_match.status_code == 200
    assert no_match.json()["products"] == []
    assert no_match.json()["message"] == "No products found for this category"


def test_store_products(client, seed):
    """Test listing products of a store."""
    mine = seed.store("Mine")
    other = seed.store("Other")
    seed.product(mine, name="Mine 1")
    seed.product(other, name="Other 1")

    response = client.get(f"/api/v1/stores/{mine.id}/products")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["products"]] == ["Mine 1"]
    assert client.get("/api/v1/stores/999/products").status_code == 404


def test_review_comments(client, seed):
    """Test paginated comments of a review."""
    store = seed.store()
    product = seed.product(store)
    review = seed.review(product)
    author = seed.user("Alan", "Turing")
    for i in range(3):
        seed.comment(review, author=author, body=f"c{i}")

    response = client.get(f"/api/v1/reviews/{review.id}/comments?limit=2&page=2")

    assert response.status_code == 200
    data = response.json()
    assert [c["body"] for c in data["comments"]] == ["c0"]
    assert data["comments"][0]["authorName"] == "Alan Turing"
    assert data["total"] == 3
    assert data["maxPageCount"] == 2


def test_review_without_comments(client, seed):
    """Test a review with no comments is an empty success."""
    store = seed.store()
    review = seed.review(seed.product(store))

    response = client.get(f"/api/v1/reviews/{review.id}/comments")

    assert response.status_code == 200
    assert response.json()["comments"] == []
    assert response.json()["message"] == "No comments found for this review"


def test_review_not_found(client):
    """Test comments of a missing review is 404."""
    response = client.get("/api/v1/reviews/999/comments")

    assert response.status_code == 404
    assert response.json()["message"] == "Review not found"
