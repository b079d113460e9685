"""Tests for offer detail parsing from the API, embedded state and markup."""

import json

from olxscraper.scrapers.product_parser import (
    offer_id_from_url,
    param_value,
    parse_product_api_response,
    parse_product_from_api,
    parse_product_from_markup,
    parse_product_from_state,
    resolve_api_price,
    split_parameters,
)
from olxscraper.scrapers.utils.normalizer import clean_photo_url, normalize_description


def api_ad(**overrides):
    ad = {
        "id": 1052407977,
        "url": "https://www.olx.pl/d/oferta/rower-gorski-CID767-IDV1abc.html",
        "title": "Rower górski Kross",
        "description": "Stan bardzo dobry.<br />Odbiór osobisty.<br>Zapraszam &amp; pozdrawiam",
        "last_refresh_time": "2024-05-02T08:00:00+02:00",
        "created_time": "2024-04-20T08:00:00+02:00",
        "price": {"displayValue": "1 200 zł", "negotiable": True},
        "params": [
            {"key": "state", "name": "Stan", "value": {"key": "used", "label": "Używane"}},
            {"key": "size", "name": "Rozmiar ramy", "value": "19"},
            {"key": "price", "name": "Cena", "value": {"value": 1200, "label": "1 200 zł"}},
        ],
        "photos": [
            {"link": "https://ireland.apollo.olxcdn.com/v1/files/a1-PL/image;s={width}x{height};q=80"},
            {"link": "https://ireland.apollo.olxcdn.com/v1/files/a2-PL/image;s=1000x700"},
        ],
        "location": {"city": {"name": "Kraków"}, "region": {"name": "Małopolskie"}},
        "user": {"name": "Jan", "created": "2015-03-01T10:00:00+01:00"},
        "contact": {"name": "Jan K."},
    }
    ad.update(overrides)
    return ad


class TestParameters:
    def test_value_precedence(self):
        assert param_value({"value": "19"}) == "19"
        assert param_value({"value": {"label": "Używane"}}) == "Używane"
        assert param_value({"value": {"key": "x"}, "normalizedValue": "xl"}) == "xl"
        assert param_value({"value": 42}) == "42"
        assert param_value({}) == ""

    def test_price_entries_are_diverted(self):
        params = [
            {"name": "Marka", "value": "Kross"},
            {"key": "price", "value": "999 zł"},
        ]
        parameters, diverted = split_parameters(params)

        assert parameters == {"Marka": "Kross"}
        assert diverted == "999 zł"

    def test_localized_price_label_is_diverted(self):
        parameters, diverted = split_parameters([{"name": "Cena", "key": "cena_pln", "value": "50 zł"}])
        assert parameters == {}
        assert diverted == "50 zł"

    def test_non_list_params(self):
        assert split_parameters(None) == ({}, "")


class TestApiPrice:
    def test_display_value_wins(self):
        assert resolve_api_price({"displayValue": "10 zł", "regularPrice": {"displayValue": "12 zł"}}) == "10 zł"

    def test_regular_display_value(self):
        assert resolve_api_price({"regularPrice": {"displayValue": "12 zł"}}) == "12 zł"

    def test_computed_from_regular_price(self):
        assert resolve_api_price({"regularPrice": {"value": 150, "currencyCode": "PLN"}}) == "150 PLN"

    def test_default_currency(self):
        assert resolve_api_price({"regularPrice": {"value": 150}}) == "150 zł"

    def test_diverted_price_is_last_resort(self):
        assert resolve_api_price({}, "75 zł") == "75 zł"
        assert resolve_api_price(None) == ""


class TestApiPayload:
    def test_full_offer(self):
        product = parse_product_from_api(api_ad())

        assert product.id == "1052407977"
        assert product.title == "Rower górski Kross"
        assert product.description == "Stan bardzo dobry.\nOdbiór osobisty.\nZapraszam & pozdrawiam"
        assert product.price == "1 200 zł"
        assert product.negotiable is True
        assert product.parameters == {"Stan": "Używane", "Rozmiar ramy": "19"}
        assert product.photos == [
            "https://ireland.apollo.olxcdn.com/v1/files/a1-PL/image",
            "https://ireland.apollo.olxcdn.com/v1/files/a2-PL/image",
        ]
        assert product.location == "Kraków, Małopolskie"
        assert product.posted_at == "2024-05-02T08:00:00+02:00"
        assert product.seller.name == "Jan K."
        assert product.seller.member_since == "2015-03-01T10:00:00+01:00"
        assert product.found

    def test_price_from_parameters_when_price_missing(self):
        product = parse_product_from_api(api_ad(price={}))
        assert product.price == "1 200 zł"
        assert product.negotiable is False
        assert "Cena" not in product.parameters

    def test_location_path_name_wins(self):
        product = parse_product_from_api(api_ad(location={"pathName": "Kraków, Krowodrza", "city": {"name": "Kraków"}}))
        assert product.location == "Kraków, Krowodrza"

    def test_posted_at_falls_back_to_camel_case_keys(self):
        product = parse_product_from_api(
            api_ad(last_refresh_time=None, created_time=None, createdTime="2024-01-01T00:00:00Z")
        )
        assert product.posted_at == "2024-01-01T00:00:00Z"

    def test_seller_name_falls_back_to_user(self):
        product = parse_product_from_api(api_ad(contact={}))
        assert product.seller.name == "Jan"

    def test_relative_url_is_made_absolute(self):
        product = parse_product_from_api(api_ad(url="/d/oferta/x-CID1-IDq1.html"))
        assert product.url == "https://www.olx.pl/d/oferta/x-CID1-IDq1.html"

    def test_scalar_nodes_do_not_break_parsing(self):
        product = parse_product_from_api(api_ad(price="1 200 zł", location="Kraków", user="Jan", url=5))

        assert product.title == "Rower górski Kross"
        assert product.price == "1 200 zł"
        assert product.location == ""
        assert product.seller.member_since == ""
        assert product.url == ""

    def test_response_body(self):
        product = parse_product_api_response(json.dumps({"data": api_ad()}))
        assert product.id == "1052407977"

    def test_rendered_json_body(self):
        body = "<html><body><pre>" + json.dumps({"data": api_ad(description="Opis")}) + "</pre></body></html>"
        product = parse_product_api_response(body)
        assert product.title == "Rower górski Kross"

    def test_missing_offer(self):
        product = parse_product_api_response(json.dumps({"error": {"status": 404}}))
        assert not product.found
        assert product.id == ""

    def test_undecodable_body(self):
        assert not parse_product_api_response("<html>Service unavailable</html>").found


class TestStateAd:
    def test_offer_from_state(self):
        ad = {
            "id": 1052407977,
            "title": "Rower górski Kross",
            "description": "<p>Opis<br/>roweru</p>",
            "price": {"regularPrice": {"value": 1200, "currencyCode": "PLN"}, "negotiation": False},
            "contact": {"name": "Jan K.", "negotiation": True},
            "params": [
                {"key": "state", "name": "Stan", "value": "Używane", "normalizedValue": "used"},
                {"key": "price", "name": "Cena", "value": "1 200 zł"},
            ],
            "photos": ["https://ireland.apollo.olxcdn.com/v1/files/a1-PL/image;s=644x461;q=50"],
            "location": {"cityName": "Kraków", "regionName": "Małopolskie"},
            "createdTime": "2024-04-20T08:00:00+02:00",
            "user": {"name": "Jan", "created": "2015-03-01"},
        }
        url = "https://www.olx.pl/d/oferta/rower-gorski-CID767-IDV1abc.html"
        product = parse_product_from_state(ad, url)

        assert product.id == "1052407977"
        assert product.description == "Opis\nroweru"
        assert product.price == "1200 PLN"
        assert product.negotiable is True
        assert product.parameters == {"Stan": "Używane"}
        assert product.photos == ["https://ireland.apollo.olxcdn.com/v1/files/a1-PL/image"]
        assert product.location == "Kraków, Małopolskie"
        assert product.posted_at == "2024-04-20T08:00:00+02:00"
        assert product.seller.name == "Jan K."
        assert product.url == url

    def test_display_value_and_price_negotiation(self):
        ad = {"title": "Kask", "price": {"displayValue": "80 zł", "negotiation": True}}
        product = parse_product_from_state(ad, "https://www.olx.pl/d/oferta/kask-CID1-IDk1.html")
        assert product.price == "80 zł"
        assert product.negotiable is True
        assert product.location == ""


OFFER_MARKUP = """
<html><head><style>body { margin: 0 }</style></head><body>
<h4 data-testid="offer_title">Rower górski Kross</h4>
<div data-testid="ad-price-container"><h3>1 200 zł</h3><p>do negocjacji</p></div>
<span data-testid="ad-posted-at">Dzisiaj o 10:15</span>
<div data-testid="ad_description">Stan bardzo dobry.<br/>Odbiór osobisty.</div>
<div data-testid="ad-parameters-container">
  <p>Prywatne</p>
  <p><span>Stan: </span>Używane</p>
  <p>Rozmiar ramy: 19"</p>
</div>
<img data-testid="swiper-image" src="https://ireland.apollo.olxcdn.com/v1/files/a1-PL/image;s=1000x700;q=80">
<img data-testid="swiper-image" srcset="https://ireland.apollo.olxcdn.com/v1/files/a2-PL/image;s=644x461 644w, https://ireland.apollo.olxcdn.com/v1/files/a2-PL/image;s=1000x700 1000w">
<h4 data-testid="user-profile-user-name">Jan K.</h4>
<p data-testid="member-since">Na OLX od marzec 2015</p>
</body></html>
"""


class TestMarkup:
    URL = "https://www.olx.pl/d/oferta/rower-gorski-CID767-IDV1abc.html"

    def test_offer_from_markup(self):
        product = parse_product_from_markup(OFFER_MARKUP, self.URL)

        assert product.id == "V1abc"
        assert product.title == "Rower górski Kross"
        assert product.price == "1 200 złdo negocjacji"
        assert product.negotiable is True
        assert product.description == "Stan bardzo dobry.\nOdbiór osobisty."
        assert product.parameters == {"Stan": "Używane", "Rozmiar ramy": '19"'}
        assert product.photos == [
            "https://ireland.apollo.olxcdn.com/v1/files/a1-PL/image",
            "https://ireland.apollo.olxcdn.com/v1/files/a2-PL/image",
        ]
        assert product.location == ""
        assert product.posted_at == "Dzisiaj o 10:15"
        assert product.seller.name == "Jan K."
        assert product.seller.member_since == "Na OLX od marzec 2015"
        assert product.url == self.URL

    def test_raw_negotiation_flag(self):
        markup = '<h4 data-testid="offer_title">Kask</h4><script>{"negotiation":true}</script>'
        assert parse_product_from_markup(markup, self.URL).negotiable is True

    def test_not_negotiable(self):
        markup = '<h4 data-testid="offer_title">Kask</h4><div data-testid="ad-price-container">80 zł</div>'
        product = parse_product_from_markup(markup, self.URL)
        assert product.negotiable is False
        assert product.price == "80 zł"

    def test_empty_page_is_not_found(self):
        product = parse_product_from_markup("<html></html>", self.URL)
        assert not product.found
        assert product.parameters == {}
        assert product.photos == []


class TestNormalization:
    def test_offer_id_from_url(self):
        assert offer_id_from_url("https://www.olx.pl/d/oferta/x-CID767-IDV1abc.html") == "V1abc"
        assert offer_id_from_url("https://www.olx.pl/oferta/1052407977?ref=x") == "1052407977"
        assert offer_id_from_url("https://www.olx.pl/oferta/") == ""

    def test_clean_photo_url(self):
        assert clean_photo_url("https://img/a;s={width}x{height};q=80") == "https://img/a"
        assert clean_photo_url("https://img/a;s=216x152") == "https://img/a"
        assert clean_photo_url("https://img/plain.jpg") == "https://img/plain.jpg"

    def test_description_breaks_before_tags(self):
        assert normalize_description("<b>a</b><br>b<BR/>c") == "a\nb\nc"
        assert normalize_description(None) == ""
