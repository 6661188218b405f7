from conftest import auth_headers


async def register(client, email="reader@bookheaven.com", password="s3cret-pass"):
    return await client.post(
        "/accounts/register",
        json={"user_name": "Reader", "email": email, "password": password, "address": "12 Library Lane"},
    )


async def login(client, email="reader@bookheaven.com", password="s3cret-pass"):
    return await client.post("/accounts/login", json={"email": email, "password": password})


async def test_register_then_login_returns_working_token(client):
    created = await register(client)
    assert created.status_code == 201
    assert created.json()["user"]["role"] == "USER"

    token = await login(client)
    assert token.status_code == 200
    headers = {"Authorization": f"Bearer {token.json()['access_token']}"}

    me = await client.get("/accounts/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "reader@bookheaven.com"
    assert me.json()["user"]["orders"] == []


async def test_configured_admin_email_registers_as_admin(client):
    created = await register(client, email="Boss@BookHeaven.com")

    assert created.status_code == 201
    assert created.json()["user"]["role"] == "ADMIN"


async def test_duplicate_email_conflicts(client):
    await register(client)

    again = await register(client)

    assert again.status_code == 409
    assert again.json() == {"success": False, "message": "Email already registered"}


async def test_wrong_password_is_unauthorized(client):
    await register(client)

    resp = await login(client, password="nope-nope")

    assert resp.status_code == 401
    assert resp.json()["message"] == "Incorrect email or password"


async def test_invalid_registration_payload_is_bad_request(client):
    resp = await client.post("/accounts/register", json={"user_name": "x", "email": "not-an-email", "password": "123456"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


async def test_garbage_token_is_rejected(client):
    resp = await client.get("/accounts/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401


async def test_cart_merges_quantities_and_tracks_price(client, customer_headers, make_book):
    book = await make_book(price=9.5)

    await client.post("/accounts/me/cart", json={"book_id": book.id, "quantity": 1}, headers=customer_headers)
    resp = await client.post("/accounts/me/cart", json={"book_id": book.id, "quantity": 2}, headers=customer_headers)

    assert resp.status_code == 200
    [line] = resp.json()["user"]["cart"]
    assert (line["book_id"], line["quantity"], line["unit_price"], line["price"]) == (book.id, 3, 9.5, 28.5)

    removed = await client.delete(f"/accounts/me/cart/{book.id}", headers=customer_headers)
    assert removed.json()["user"]["cart"] == []


async def test_cart_rejects_unknown_book(client, customer_headers):
    resp = await client.post("/accounts/me/cart", json={"book_id": 4040, "quantity": 1}, headers=customer_headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Book 4040 not found"


async def test_favorites_are_idempotent(client, customer, make_book):
    book = await make_book()
    headers = auth_headers(customer)

    await client.post(f"/accounts/me/favorites/{book.id}", headers=headers)
    resp = await client.post(f"/accounts/me/favorites/{book.id}", headers=headers)

    assert [fav["book_id"] for fav in resp.json()["user"]["favorites"]] == [book.id]

    removed = await client.delete(f"/accounts/me/favorites/{book.id}", headers=headers)
    assert removed.json()["user"]["favorites"] == []
    missing = await client.delete(f"/accounts/me/favorites/{book.id}", headers=headers)
    assert missing.status_code == 404


async def test_catalog_lookup(client, make_book):
    book = await make_book(price=4.0, book_file="https://files.test/secret.pdf", title="Dune")

    listed = await client.get("/books/")
    fetched = await client.get(f"/books/{book.id}")
    missing = await client.get("/books/9999")

    assert [b["title"] for b in listed.json()["books"]] == ["Dune"]
    assert fetched.json()["book"]["price"] == 4.0
    assert "book_file" not in fetched.json()["book"]
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Book 9999 not found"}
