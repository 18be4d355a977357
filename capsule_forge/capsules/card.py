"""Card capsule: container with optional header, image and footer slot."""

from capsule_forge.schema import CapsuleDefinition

WEB = """import React from 'react'

export interface {% component %}Props {
  title?: string
  subtitle?: string
  variant?: 'elevated' | 'outlined' | 'filled'
  padding?: 'none' | 'sm' | 'md' | 'lg'
  onPress?: () => void
  imageUrl?: string
  footer?: React.ReactNode
  children?: React.ReactNode
}

const PADDING = { none: 0, sm: 8, md: 16, lg: 24 }

export function {% component %}({
  title,
  subtitle,
  variant = {% props.variant %},
  padding = {% props.padding %},
  onPress,
  imageUrl,
  footer,
  children,
}: {% component %}Props) {
  const style: React.CSSProperties = {
    background: variant === 'filled' ? {% theme.colors.surface %} : {% theme.colors.background %},
    border: variant === 'outlined' ? '1px solid #E5E7EB' : 'none',
    boxShadow: variant === 'elevated' && {% theme.shadows %} ? '0 1px 3px rgba(0, 0, 0, 0.12)' : 'none',
    borderRadius: {% theme.radius %},
    overflow: 'hidden',
    cursor: onPress ? 'pointer' : undefined,
  }
  return (
    <div style={style} onClick={onPress} role={onPress ? 'button' : undefined}>
      {imageUrl ? <img src={imageUrl} alt={title ?? ''} style={{ width: '100%' }} /> : null}
      <div style={{ padding: PADDING[padding] }}>
        {title ? <h3 style={{ margin: 0, color: {% theme.colors.textPrimary %} }}>{title}</h3> : null}
        {subtitle ? <p style={{ margin: 0, color: {% theme.colors.textSecondary %} }}>{subtitle}</p> : null}
        {children}
      </div>
      {footer ? <div style={{ padding: PADDING[padding], paddingTop: 0 }}>{footer}</div> : null}
    </div>
  )
}

export default {% component %}
"""

IOS = """import SwiftUI

struct {% component %}<Content: View>: View {
    enum Variant { case elevated, outlined, filled }
    enum Padding { case none, sm, md, lg }

    var title: String? = nil
    var subtitle: String? = nil
    var variant: Variant = {% props.variant %}
    var padding: Padding = {% props.padding %}
    var onPress: (() -> Void)? = nil
    var imageUrl: String? = nil
    var footer: (() -> AnyView)? = nil
    @ViewBuilder var content: () -> Content

    var body: some View {
        VStack(alignment: .leading, spacing: 8) {
            if let imageUrl, let url = URL(string: imageUrl) {
                AsyncImage(url: url) { image in
                    image.resizable().scaledToFill()
                } placeholder: {
                    {% theme.colors.surface %}
                }
            }
            if let title {
                SwiftUI.Text(title).font(.headline).foregroundColor({% theme.colors.textPrimary %})
            }
            if let subtitle {
                SwiftUI.Text(subtitle).font(.subheadline).foregroundColor({% theme.colors.textSecondary %})
            }
            content()
            if let footer {
                footer()
            }
        }
        .padding(inset)
        .background(variant == .filled ? {% theme.colors.surface %} : {% theme.colors.background %})
        .cornerRadius({% theme.radius %})
        .shadow(radius: variant == .elevated && {% theme.shadows %} ? 3 : 0)
        .onTapGesture { onPress?() }
    }

    private var inset: CGFloat {
        switch padding {
        case .none: return 0
        case .sm: return 8
        case .md: return 16
        case .lg: return 24
        }
    }
}
"""

ANDROID = """import androidx.compose.foundation.BorderStroke
import androidx.compose.foundation.clickable
import androidx.compose.foundation.layout.Arrangement
import androidx.compose.foundation.layout.Column
import androidx.compose.foundation.layout.padding
import androidx.compose.foundation.shape.RoundedCornerShape
import androidx.compose.material3.CardDefaults
import androidx.compose.material3.ElevatedCard
import androidx.compose.material3.OutlinedCard
import androidx.compose.runtime.Composable
import androidx.compose.ui.Modifier
import androidx.compose.ui.graphics.Color
import androidx.compose.ui.unit.dp
import coil.compose.AsyncImage

@Composable
fun {% component %}(
    title: String? = null,
    subtitle: String? = null,
    variant: String = {% props.variant %},
    padding: String = {% props.padding %},
    onPress: (() -> Unit)? = null,
    imageUrl: String? = null,
    footer: (@Composable () -> Unit)? = null,
    modifier: Modifier = Modifier,
    content: @Composable () -> Unit = {},
) {
    val inset = when (padding) {
        "none" -> 0.dp
        "sm" -> 8.dp
        "lg" -> 24.dp
        else -> 16.dp
    }
    val shape = RoundedCornerShape({% theme.radius %}.dp)
    val clickable = if (onPress != null) modifier.clickable { onPress() } else modifier
    val body: @Composable () -> Unit = {
        if (imageUrl != null) AsyncImage(model = imageUrl, contentDescription = title)
        Column(modifier = Modifier.padding(inset), verticalArrangement = Arrangement.spacedBy(8.dp)) {
            if (title != null) androidx.compose.material3.Text(text = title, color = {% theme.colors.textPrimary %})
            if (subtitle != null) androidx.compose.material3.Text(text = subtitle, color = {% theme.colors.textSecondary %})
            content()
            footer?.invoke()
        }
    }
    when (variant) {
        "outlined" -> OutlinedCard(modifier = clickable, shape = shape, border = BorderStroke(1.dp, Color(0xFFE5E7EB))) { body() }
        "filled" -> androidx.compose.material3.Card(
            modifier = clickable,
            shape = shape,
            colors = CardDefaults.cardColors(containerColor = {% theme.colors.surface %}),
        ) { body() }
        else -> ElevatedCard(
            modifier = clickable,
            shape = shape,
            elevation = CardDefaults.elevatedCardElevation(defaultElevation = if ({% theme.shadows %}) 3.dp else 0.dp),
        ) { body() }
    }
}
"""

CARD = CapsuleDefinition.model_validate(
    {
        "id": "card",
        "name": "Card",
        "description": "Content container with optional header, image and footer",
        "category": "layout",
        "tags": ["container", "surface"],
        "children": True,
        "props": [
            {"name": "title", "type": "string"},
            {"name": "subtitle", "type": "string"},
            {
                "name": "variant",
                "type": "select",
                "default": "elevated",
                "options": ["elevated", "outlined", "filled"],
            },
            {
                "name": "padding",
                "type": "select",
                "default": "md",
                "options": ["none", "sm", "md", "lg"],
            },
            {"name": "onPress", "type": "action"},
            {"name": "imageUrl", "type": "image"},
            {"name": "footer", "type": "slot", "description": "Content below the body"},
        ],
        "platforms": {
            "web": {"code": WEB, "dependencies": ["react"]},
            "ios": {"code": IOS},
            "android": {"code": ANDROID, "dependencies": ["io.coil-kt:coil-compose"]},
        },
    }
)
